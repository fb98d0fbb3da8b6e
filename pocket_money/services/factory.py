"""Wire the domain service to the configured account store."""

from __future__ import annotations

from functools import lru_cache

from pocket_money.config import settings
from pocket_money.services.pocket_money_service import PocketMoneyService
from pocket_money.store.base import AccountStore
from pocket_money.store.memory import MemoryAccountStore
from pocket_money.store.supabase_store import SupabaseAccountStore
from pocket_money.utils.supabase_client import get_service_client


@lru_cache(maxsize=1)
def get_store() -> AccountStore:
    """Return the process-wide account store selected by STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return MemoryAccountStore()
    return SupabaseAccountStore(get_service_client())


def build_service(store: AccountStore | None = None) -> PocketMoneyService:
    """Return a service for the configured child account."""
    return PocketMoneyService(
        store or get_store(),
        account_name=settings.child_name,
        default_weekly_allowance=settings.default_weekly_allowance,
        default_interest_rate=settings.default_interest_rate,
    )
