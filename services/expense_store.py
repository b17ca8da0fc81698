"""In-memory, append-only expense storage."""
import logging
import threading
import uuid
from typing import List

from models.expense import Expense
from services.validation import ValidatedExpense

logger = logging.getLogger(__name__)


class ExpenseStore:
    """
    Ordered collection of expenses held for the lifetime of the process.

    Records are only ever appended. All access goes through a lock so a single
    writer is enforced even when callers run on worker threads.
    """

    def __init__(self) -> None:
        self._expenses: List[Expense] = []
        self._lock = threading.Lock()

    def add(self, validated: ValidatedExpense) -> Expense:
        expense = Expense(
            id=str(uuid.uuid4()),
            category=validated.category,
            amount=validated.amount,
            date=validated.date,
            description=validated.description or "",
        )
        with self._lock:
            self._expenses.append(expense)
            count = len(self._expenses)
        logger.debug(f"Stored expense {expense.id} ({count} total).")
        return expense

    def all(self) -> List[Expense]:
        """Snapshot of all expenses in insertion order."""
        with self._lock:
            return list(self._expenses)

    def __len__(self) -> int:
        with self._lock:
            return len(self._expenses)
