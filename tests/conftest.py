"""
Pytest fixtures for the expense tracker API tests
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from config import Settings
from main import create_app
from services.expense_store import ExpenseStore
from services.validation import validate_expense_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(summary_enabled=False, rate_limit_enabled=False)


@pytest.fixture
def store() -> ExpenseStore:
    return ExpenseStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def add(store):
    """Stores a payload directly, bypassing HTTP."""
    def _add(category="Food", amount=10, date="2024-01-10", description=None):
        payload = {"category": category, "amount": amount, "date": date}
        if description is not None:
            payload["description"] = description
        return store.add(validate_expense_payload(payload))
    return _add
