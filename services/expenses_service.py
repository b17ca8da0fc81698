"""Service layer for handling expense-related logic."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.expense import PREDEFINED_CATEGORIES, CategoryTotal, Expense, SpendingAnalysis
from services.expense_store import ExpenseStore
from services.validation import ExpenseValidationError, parse_date, validate_expense_payload

logger = logging.getLogger(__name__)

NO_CATEGORY = "None"


# --- Write Path ---

def add_expense(store: ExpenseStore, payload: Optional[Dict[str, Any]]) -> Expense:
    """Validates a submitted payload and appends it to the store."""
    try:
        validated = validate_expense_payload(payload)
    except ExpenseValidationError as e:
        logger.warning(f"Rejected expense payload: {e.message}")
        raise

    expense = store.add(validated)
    logger.info(f"Added expense {expense.id}: {expense.category} {expense.amount} on {expense.date.isoformat()}")
    return expense


# --- Query Engine ---

def filter_expenses(
    store: ExpenseStore,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[Expense]:
    """
    Returns stored expenses matching every active filter, in insertion order.

    The category filter is an exact match on the stored (canonical) value.
    The date filter is inclusive on both ends and only applies when both
    bounds are given; an unparseable bound matches nothing.
    """
    expenses = store.all()

    if category:
        expenses = [exp for exp in expenses if exp.category == category]

    if start_date and end_date:
        start = parse_date(start_date)
        end = parse_date(end_date)
        if start is None or end is None:
            logger.debug(f"Unparseable date range {start_date!r}..{end_date!r}; no expenses match.")
            return []
        expenses = [exp for exp in expenses if _in_range(exp.date, start, end)]

    logger.info(f"Filtered {len(expenses)} expenses (category={category!r}, startDate={start_date!r}, endDate={end_date!r})")
    return expenses


def _in_range(value: datetime, start: datetime, end: datetime) -> bool:
    return start <= value <= end


# --- Analysis Engine ---

def category_totals(expenses: List[Expense]) -> List[CategoryTotal]:
    """Sum of amounts per predefined category, in the fixed category order."""
    totals = []
    for category in PREDEFINED_CATEGORIES:
        total = sum(exp.amount for exp in expenses if exp.category == category)
        totals.append(CategoryTotal(category=category, total=total))
    return totals


def highest_spending(totals: List[CategoryTotal]) -> CategoryTotal:
    """Strictly greatest total; the first entry wins ties and all-zero totals yield "None"."""
    best = CategoryTotal(category=NO_CATEGORY, total=0)
    for entry in totals:
        if entry.total > best.total:
            best = entry
    return best


def analyze_spending(store: ExpenseStore) -> SpendingAnalysis:
    totals = category_totals(store.all())
    result = SpendingAnalysis(analysis=totals, highest_spending=highest_spending(totals))
    logger.info(f"Spending analysis computed. Highest: {result.highest_spending.category} ({result.highest_spending.total})")
    return result
