"""Persistence contract used by the domain service."""

from __future__ import annotations

from typing import Any, Protocol

from pocket_money.schemas.account import Account, Transaction, TransactionType

ACCOUNTS_TABLE = "kids"
TRANSACTIONS_TABLE = "transactions"


class AccountStore(Protocol):
    """Narrow read/write contract over the account and ledger tables.

    Implementations return ``None`` or empty lists for missing rows and raise
    ``BackendError`` for genuine data-access failures.
    """

    def get_account_by_name(self, name: str) -> Account | None: ...

    def insert_account(
        self, name: str, weekly_allowance: float, interest_rate: float
    ) -> Account: ...

    def update_account(self, account_id: int, fields: dict[str, Any]) -> Account: ...

    def insert_transaction(
        self,
        account_id: int,
        entry_type: TransactionType,
        amount: float,
        description: str | None = None,
    ) -> Transaction: ...

    def list_transactions(
        self,
        account_id: int,
        limit: int | None = None,
        entry_type: TransactionType | None = None,
        offset: int = 0,
    ) -> list[Transaction]: ...
