"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")
    os.environ.setdefault("STORAGE_BACKEND", "memory")


_set_default_env()

PARENT_USER = SimpleNamespace(id="parent-1", email="parent@example.com")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value


@pytest.fixture
def clock() -> FakeClock:
    """A clock starting mid-month so month boundaries are easy to reason about."""
    return FakeClock(datetime(2026, 3, 10, 12, 0, tzinfo=UTC))


@pytest.fixture
def store(clock: FakeClock):
    """Empty in-memory account store sharing the fake clock."""
    from pocket_money.store.memory import MemoryAccountStore

    return MemoryAccountStore(clock=clock)


@pytest.fixture
def service(store, clock: FakeClock):
    """Service for the default child with a 10.00 allowance and 1% interest."""
    from pocket_money.services.pocket_money_service import PocketMoneyService

    return PocketMoneyService(
        store,
        account_name="Louis",
        default_weekly_allowance=10.0,
        default_interest_rate=0.01,
        clock=clock,
    )


@pytest.fixture
def anonymous_client(service):
    """Create a FastAPI test client bound to the in-memory service, signed out."""
    from pocket_money.dependencies import get_service
    from pocket_money.main import app

    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client: TestClient):
    """Test client whose requests come from a signed-in parent."""
    from pocket_money.dependencies import get_family_user, get_parent_user
    from pocket_money.main import app

    app.dependency_overrides[get_parent_user] = lambda: PARENT_USER
    app.dependency_overrides[get_family_user] = lambda: PARENT_USER
    return anonymous_client
