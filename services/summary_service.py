"""Periodic rolling-window spending summaries."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from models.expense import Expense, SpendingSummary
from services.expense_store import ExpenseStore

logger = logging.getLogger(__name__)

DEFAULT_WINDOWS: List[Tuple[str, int]] = [("Weekly", 7), ("Monthly", 30)]


def summarize_window(expenses: Iterable[Expense], days: int, now: Optional[datetime] = None) -> SpendingSummary:
    """
    Totals expenses dated on or after ``now - days``.

    Only the lower bound is enforced, so future-dated expenses are counted too.
    """
    now = now or datetime.now(timezone.utc)
    window_start = now - timedelta(days=days)

    summary = SpendingSummary()
    for exp in expenses:
        if exp.date >= window_start:
            summary.total += exp.amount
            summary.categories[exp.category] = summary.categories.get(exp.category, 0) + exp.amount
    return summary


class SpendingSummarizer:
    """Recomputes and logs rolling summaries on independent timers, one per window."""

    def __init__(self, store: ExpenseStore, interval: float = 60, windows: Optional[List[Tuple[str, int]]] = None):
        self.store = store
        self.interval = interval
        self.windows = windows or DEFAULT_WINDOWS
        self._tasks: List[asyncio.Task] = []

    def report(self, label: str, days: int, now: Optional[datetime] = None) -> SpendingSummary:
        summary = summarize_window(self.store.all(), days, now=now)
        logger.info(f"{label} Summary: {summary.model_dump()}")
        return summary

    async def run_forever(self, label: str, days: int) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.report(label, days)
            except Exception as e:
                logger.exception(f"Failed to compute {label.lower()} summary: {e}")

    def start(self) -> None:
        if self._tasks:
            return
        for label, days in self.windows:
            self._tasks.append(asyncio.create_task(self.run_forever(label, days), name=f"{label.lower()}-summary"))
        logger.info(f"Started {len(self._tasks)} summary tasks (every {self.interval}s).")

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Summary tasks stopped.")

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)
