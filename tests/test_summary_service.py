"""Tests for rolling-window summaries and the periodic summarizer"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone

from services.summary_service import SpendingSummarizer, summarize_window

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def iso(moment: datetime) -> str:
    return moment.isoformat()


class TestSummarizeWindow:

    def test_empty(self, store):
        summary = summarize_window(store.all(), 7, now=NOW)
        assert summary.total == 0
        assert summary.categories == {}

    def test_window_lower_bound(self, store, add):
        add("Food", 10, iso(NOW - timedelta(days=2)))
        add("Food", 5, iso(NOW - timedelta(days=7)))
        add("Travel", 99, iso(NOW - timedelta(days=7, seconds=1)))
        summary = summarize_window(store.all(), 7, now=NOW)
        assert summary.total == 15
        assert summary.categories == {"Food": 15}

    def test_future_dated_expenses_are_included(self, store, add):
        add("Bills", 20, iso(NOW + timedelta(days=60)))
        summary = summarize_window(store.all(), 7, now=NOW)
        assert summary.total == 20
        assert summary.categories == {"Bills": 20}

    def test_monthly_window_is_wider(self, store, add):
        add("Food", 10, iso(NOW - timedelta(days=3)))
        add("Shopping", 30, iso(NOW - timedelta(days=20)))
        weekly = summarize_window(store.all(), 7, now=NOW)
        monthly = summarize_window(store.all(), 30, now=NOW)
        assert weekly.categories == {"Food": 10}
        assert monthly.categories == {"Food": 10, "Shopping": 30}
        assert monthly.total == 40


class TestSpendingSummarizer:

    def test_report_logs_and_leaves_store_untouched(self, store, add, caplog):
        add("Food", 10, iso(NOW - timedelta(days=1)))
        summarizer = SpendingSummarizer(store)
        with caplog.at_level(logging.INFO, logger="services.summary_service"):
            summary = summarizer.report("Weekly", 7, now=NOW)
        assert summary.total == 10
        assert "Weekly Summary:" in caplog.text
        assert len(store) == 1

    async def test_start_runs_each_window_on_its_timer(self, store, add, caplog):
        add("Travel", 42, datetime.now(timezone.utc).isoformat())
        summarizer = SpendingSummarizer(store, interval=0.01)
        with caplog.at_level(logging.INFO, logger="services.summary_service"):
            summarizer.start()
            assert summarizer.running
            await asyncio.sleep(0.05)
            await summarizer.stop()
        assert not summarizer.running
        assert "Weekly Summary:" in caplog.text
        assert "Monthly Summary:" in caplog.text

    async def test_stop_without_start(self, store):
        summarizer = SpendingSummarizer(store)
        await summarizer.stop()
        assert not summarizer.running
