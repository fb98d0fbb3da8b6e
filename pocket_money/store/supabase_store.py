"""Supabase-backed account store."""

from __future__ import annotations

import logging
import time
from typing import Any

from postgrest import APIError

from pocket_money.schemas.account import Account, Transaction, TransactionType
from pocket_money.store.base import ACCOUNTS_TABLE, TRANSACTIONS_TABLE
from pocket_money.utils.errors import BackendError, NotFoundError
from supabase import Client

# PostgREST: "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"
logger = logging.getLogger(__name__)


class SupabaseAccountStore:
    """Thin PostgREST wrapper implementing ``AccountStore``."""

    def __init__(self, client: Client, slow_query_threshold_ms: int = 0) -> None:
        self.client = client
        self.slow_query_threshold_ms = slow_query_threshold_ms

    def execute(self, query, default: Any = None) -> Any:
        """Execute a Supabase query and normalize API errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            if getattr(exc, "code", None) == NO_ROWS_CODE:
                return default
            message = getattr(exc, "message", None) or "Database request failed"
            logger.error("Supabase request failed: %s", message)
            raise BackendError(str(message), backend_code=getattr(exc, "code", None)) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        if self.slow_query_threshold_ms > 0 and elapsed_ms >= self.slow_query_threshold_ms:
            logger.warning("Slow Supabase query %.1fms", elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def get_account_by_name(self, name: str) -> Account | None:
        """Return the account called ``name`` or None."""
        rows = self.execute(
            self.client.table(ACCOUNTS_TABLE).select("*").eq("name", name).limit(1),
            default=[],
        )
        if not rows:
            return None
        return Account.model_validate(rows[0])

    def insert_account(self, name: str, weekly_allowance: float, interest_rate: float) -> Account:
        """Insert a new zero-balance account and return it."""
        rows = self.execute(
            self.client.table(ACCOUNTS_TABLE).insert(
                {
                    "name": name,
                    "weekly_allowance": weekly_allowance,
                    "interest_rate": interest_rate,
                    "current_balance": 0,
                }
            ),
            default=[],
        )
        if not rows:
            raise BackendError(f"Failed to insert into {ACCOUNTS_TABLE}")
        return Account.model_validate(rows[0])

    def update_account(self, account_id: int, fields: dict[str, Any]) -> Account:
        """Patch account columns and return the updated row."""
        rows = self.execute(
            self.client.table(ACCOUNTS_TABLE).update(fields).eq("id", account_id),
            default=[],
        )
        if not rows:
            raise NotFoundError("Account")
        return Account.model_validate(rows[0])

    def insert_transaction(
        self,
        account_id: int,
        entry_type: TransactionType,
        amount: float,
        description: str | None = None,
    ) -> Transaction:
        """Append one ledger row."""
        rows = self.execute(
            self.client.table(TRANSACTIONS_TABLE).insert(
                {
                    "kid_id": account_id,
                    "type": entry_type.value,
                    "amount": amount,
                    "description": description,
                }
            ),
            default=[],
        )
        if not rows:
            raise BackendError(f"Failed to insert into {TRANSACTIONS_TABLE}")
        return Transaction.model_validate(rows[0])

    def list_transactions(
        self,
        account_id: int,
        limit: int | None = None,
        entry_type: TransactionType | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """Return ledger rows newest first, optionally filtered by type.

        ``offset`` skips that many rows and only applies together with ``limit``.
        """
        query = self.client.table(TRANSACTIONS_TABLE).select("*").eq("kid_id", account_id)
        if entry_type is not None:
            query = query.eq("type", entry_type.value)
        query = query.order("created_at", desc=True).order("id", desc=True)
        if limit and offset:
            query = query.range(offset, offset + limit - 1)
        elif limit:
            query = query.limit(limit)
        rows = self.execute(query, default=[])
        return [Transaction.model_validate(row) for row in rows]
