"""Pydantic models for Expense data"""
from pydantic import BaseModel, Field, field_serializer
from datetime import datetime, timezone
from typing import Dict, List

PREDEFINED_CATEGORIES = ["Food", "Travel", "Entertainment", "Bills", "Shopping"]


def to_iso_utc(value: datetime) -> str:
    """Formats an aware datetime as a millisecond-precision UTC instant, e.g. 2024-01-10T00:00:00.000Z."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Expense(BaseModel):
    """
    Represents a single stored expense.
    """
    id: str
    category: str
    amount: float
    date: datetime
    description: str = ""

    model_config = {"frozen": True}

    @field_serializer("date")
    def serialize_date(self, value: datetime) -> str:
        return to_iso_utc(value)


class CategoryTotal(BaseModel):
    category: str
    total: float


class SpendingAnalysis(BaseModel):
    analysis: List[CategoryTotal]
    highest_spending: CategoryTotal = Field(serialization_alias="highestSpending")


class SpendingSummary(BaseModel):
    """Rolling-window totals; categories only lists those with at least one expense."""
    total: float = 0
    categories: Dict[str, float] = Field(default_factory=dict)
