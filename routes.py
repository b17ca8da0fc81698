"""API Routes for expenses"""
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from typing import Annotated, Any, Dict, Optional
from services import expenses_service
from services.expense_store import ExpenseStore
from services.validation import ExpenseValidationError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "success", "data": data})


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "error": message})


# --- Dependency Function ---
def get_expense_store(request: Request) -> ExpenseStore:
    """Dependency to get the expense store owned by the application."""
    return request.app.state.store

ExpenseStoreDep = Annotated[ExpenseStore, Depends(get_expense_store)]

# --- API Routes ---

@router.post("/expenses", status_code=201, summary="Add Expense", description="Validates and stores a single expense.")
async def create_expense(
    store: ExpenseStoreDep,
    payload: Annotated[Optional[Dict[str, Any]], Body()] = None,
):
    logger.info(f"POST /expenses endpoint called with fields: {sorted(payload) if payload else []}")
    try:
        expense = expenses_service.add_expense(store, payload)
    except ExpenseValidationError as e:
        return error_response(e.message)
    return success_response(expense.model_dump(mode="json"), status_code=201)


@router.get("/expenses", summary="List Expenses", description="Retrieves stored expenses, optionally filtered by category and/or an inclusive date range.")
async def list_expenses(
    store: ExpenseStoreDep,
    category: Optional[str] = Query(None, description="Exact category name, e.g. 'Food'."),
    start_date: Optional[str] = Query(None, alias="startDate", description="Range start; only applied together with endDate."),
    end_date: Optional[str] = Query(None, alias="endDate", description="Range end (inclusive); only applied together with startDate."),
):
    logger.info(f"GET /expenses endpoint called. category={category!r} startDate={start_date!r} endDate={end_date!r}")
    expenses = expenses_service.filter_expenses(store, category=category, start_date=start_date, end_date=end_date)
    return success_response([exp.model_dump(mode="json") for exp in expenses])


@router.get("/expenses/analysis", summary="Analyze Spending", description="Totals per predefined category and the highest-spending category.")
async def spending_analysis(store: ExpenseStoreDep):
    logger.info("GET /expenses/analysis endpoint called.")
    analysis = expenses_service.analyze_spending(store)
    return success_response(analysis.model_dump(mode="json", by_alias=True))
