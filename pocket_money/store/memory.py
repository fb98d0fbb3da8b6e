"""Process-local account store for development and tests."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pocket_money.schemas.account import Account, Transaction, TransactionType
from pocket_money.utils.errors import NotFoundError
from pocket_money.utils.time import now_utc


class MemoryAccountStore:
    """In-memory ``AccountStore`` keyed by surrogate id."""

    def __init__(self, clock: Callable[[], datetime] = now_utc) -> None:
        self.clock = clock
        self._accounts: dict[int, dict[str, Any]] = {}
        self._transactions: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def get_account_by_name(self, name: str) -> Account | None:
        with self._lock:
            for row in self._accounts.values():
                if row["name"] == name:
                    return Account.model_validate(row)
        return None

    def insert_account(self, name: str, weekly_allowance: float, interest_rate: float) -> Account:
        now = self.clock()
        with self._lock:
            account_id = len(self._accounts) + 1
            row = {
                "id": account_id,
                "name": name,
                "weekly_allowance": weekly_allowance,
                "interest_rate": interest_rate,
                "current_balance": 0.0,
                "created_at": now,
                "updated_at": now,
            }
            self._accounts[account_id] = row
            return Account.model_validate(row)

    def update_account(self, account_id: int, fields: dict[str, Any]) -> Account:
        with self._lock:
            row = self._accounts.get(account_id)
            if row is None:
                raise NotFoundError("Account")
            row.update(fields)
            return Account.model_validate(row)

    def insert_transaction(
        self,
        account_id: int,
        entry_type: TransactionType,
        amount: float,
        description: str | None = None,
    ) -> Transaction:
        now = self.clock()
        with self._lock:
            row = {
                "id": len(self._transactions) + 1,
                "kid_id": account_id,
                "type": entry_type.value,
                "amount": amount,
                "description": description,
                "created_at": now,
            }
            self._transactions.append(row)
            return Transaction.model_validate(row)

    def list_transactions(
        self,
        account_id: int,
        limit: int | None = None,
        entry_type: TransactionType | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        with self._lock:
            rows = [
                row
                for row in self._transactions
                if row["kid_id"] == account_id
                and (entry_type is None or row["type"] == entry_type.value)
            ]
        rows.sort(key=lambda row: (row["created_at"], row["id"]), reverse=True)
        if limit:
            rows = rows[offset : offset + limit]
        return [Transaction.model_validate(row) for row in rows]
