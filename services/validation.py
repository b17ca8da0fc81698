"""Validation of incoming expense payloads.

All checks are pure. Each failure raises a subclass of ``ExpenseValidationError``
carrying the fixed message returned to the client.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.expense import PREDEFINED_CATEGORIES

# Keeps per-category sums far from float overflow.
MAX_AMOUNT = 1e12


class ExpenseValidationError(ValueError):
    """Base class for client-input errors on expense submission."""
    message = "Invalid expense"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingField(ExpenseValidationError):
    message = "Category, amount, and date are required"


class InvalidCategory(ExpenseValidationError):
    message = "Invalid category"


class InvalidAmount(ExpenseValidationError):
    message = "Amount must be positive"


class InvalidDate(ExpenseValidationError):
    message = "Invalid date format"


class InvalidDescription(ExpenseValidationError):
    message = "Description must be a string"


@dataclass(frozen=True)
class ValidatedExpense:
    category: str
    amount: float
    date: datetime
    description: str = ""


def canonical_category(category: Any) -> Optional[str]:
    """Returns the predefined spelling matching ``category`` case-insensitively, or None."""
    if not isinstance(category, str):
        return None
    lowered = category.lower()
    for candidate in PREDEFINED_CATEGORIES:
        if candidate.lower() == lowered:
            return candidate
    return None


def is_positive_amount(amount: Any) -> bool:
    # bool is an int subclass but never a valid amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    try:
        value = float(amount)
    except OverflowError:
        return False
    return math.isfinite(value) and value > 0


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parses a client-supplied date into an aware UTC datetime.

    Strings are read as ISO-8601 (date-only, date-time, optional 'Z' or offset);
    naive values are taken as UTC. Numbers are epoch milliseconds.
    Returns None when the value cannot be parsed.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def validate_expense_payload(payload: Optional[Dict[str, Any]]) -> ValidatedExpense:
    """Checks required fields, category, amount, date and description, in that order."""
    payload = payload or {}
    category = payload.get("category")
    amount = payload.get("amount")
    date = payload.get("date")

    if not category or not amount or not date:
        raise MissingField()

    canonical = canonical_category(category)
    if canonical is None:
        raise InvalidCategory()

    if not is_positive_amount(amount):
        raise InvalidAmount()
    if amount > MAX_AMOUNT:
        raise InvalidAmount(f"Amount must not exceed {MAX_AMOUNT:,.0f}")

    parsed_date = parse_date(date)
    if parsed_date is None:
        raise InvalidDate()

    description = payload.get("description") or ""
    if not isinstance(description, str):
        raise InvalidDescription()

    return ValidatedExpense(
        category=canonical,
        amount=amount,
        date=parsed_date,
        description=description,
    )
