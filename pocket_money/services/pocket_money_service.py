"""Allowance, interest and withdrawal logic for a child's account."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import datetime

from pocket_money.schemas.account import (
    Account,
    InterestResult,
    Reconciliation,
    ScheduledCredit,
    Transaction,
    TransactionType,
)
from pocket_money.store.base import AccountStore
from pocket_money.utils.errors import (
    BackendError,
    InsufficientFundsError,
    InvalidInputError,
    NotFoundError,
)
from pocket_money.utils.time import is_different_month, now_utc, whole_days_between

WEEKLY_ALLOWANCE_INTERVAL_DAYS = 7
MIN_ACCOUNT_AGE_FOR_INTEREST_DAYS = 30
RECONCILIATION_TOLERANCE = 1e-9
RECONCILIATION_PAGE_SIZE = 500
logger = logging.getLogger(__name__)


def _is_valid_amount(value: float) -> bool:
    return isinstance(value, int | float) and math.isfinite(value)


def _cents(value: float) -> float:
    """Round a money amount to whole cents."""
    return round(value, 2)


class PocketMoneyService:
    """Business logic for one child's pocket money account.

    The service is stateless apart from its collaborators: every call reads the
    account row from the store, so two concurrent mutations may still race.
    """

    def __init__(
        self,
        store: AccountStore,
        account_name: str,
        default_weekly_allowance: float = 10.0,
        default_interest_rate: float = 0.01,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.store = store
        self.account_name = account_name
        self.default_weekly_allowance = default_weekly_allowance
        self.default_interest_rate = default_interest_rate
        self.clock = clock

    # Account lifecycle

    def get_account(self) -> Account | None:
        """Return the account or None when it has not been created yet."""
        return self.store.get_account_by_name(self.account_name)

    def get_or_create(
        self,
        weekly_allowance: float | None = None,
        interest_rate: float | None = None,
    ) -> Account:
        """Create the account with a zero balance if absent, otherwise return it."""
        existing = self.get_account()
        if existing is not None:
            return existing

        account = self.store.insert_account(
            self.account_name,
            weekly_allowance=(
                self.default_weekly_allowance if weekly_allowance is None else weekly_allowance
            ),
            interest_rate=self.default_interest_rate if interest_rate is None else interest_rate,
        )
        logger.info("Created account %s (id=%s)", account.name, account.id)
        return account

    def update_settings(
        self,
        weekly_allowance: float | None = None,
        interest_rate: float | None = None,
    ) -> Account:
        """Patch the supplied rates and log an audit entry for each change."""
        requested = {"weekly allowance": weekly_allowance, "interest rate": interest_rate}
        for label, value in requested.items():
            if value is not None and (not _is_valid_amount(value) or value < 0):
                raise InvalidInputError(f"Please enter a valid {label}")

        account = self._require_account()
        fields: dict[str, object] = {"updated_at": self.clock().isoformat()}
        if weekly_allowance is not None:
            fields["weekly_allowance"] = weekly_allowance
        if interest_rate is not None:
            fields["interest_rate"] = interest_rate

        updated = self.store.update_account(account.id, fields)

        if weekly_allowance is not None and weekly_allowance != account.weekly_allowance:
            self.store.insert_transaction(
                account.id,
                TransactionType.ALLOWANCE_CHANGE,
                0,
                f"Weekly allowance changed from {account.weekly_allowance:.2f} "
                f"to {weekly_allowance:.2f}",
            )
        if interest_rate is not None and interest_rate != account.interest_rate:
            self.store.insert_transaction(
                account.id,
                TransactionType.INTEREST_RATE_CHANGE,
                0,
                f"Interest rate changed from {account.interest_rate * 100:.2f}% "
                f"to {interest_rate * 100:.2f}%",
            )

        logger.info(
            "Updated settings for %s: weekly_allowance=%s interest_rate=%s",
            account.name,
            updated.weekly_allowance,
            updated.interest_rate,
        )
        return updated

    # Balance-affecting operations

    def apply_weekly_allowance(self) -> float:
        """Credit one weekly allowance and return the new balance."""
        account = self._require_account()
        allowance = _cents(account.weekly_allowance)
        new_balance = _cents(account.current_balance + allowance)
        self._record(
            account,
            new_balance,
            TransactionType.WEEKLY_ALLOWANCE,
            allowance,
            "Weekly allowance payment",
        )
        return new_balance

    def apply_monthly_interest(self) -> InterestResult:
        """Credit ``balance * interest_rate``, rounded to cents.

        Raises:
            InvalidInputError: when the balance is zero or negative.
        """
        account = self._require_account()
        if account.current_balance <= 0:
            raise InvalidInputError("No balance to earn interest on")

        interest_amount = _cents(account.current_balance * account.interest_rate)
        new_balance = _cents(account.current_balance + interest_amount)
        self._record(
            account,
            new_balance,
            TransactionType.INTEREST,
            interest_amount,
            f"Monthly interest payment ({account.interest_rate * 100:.2f}%)",
        )
        return InterestResult(interest_amount=interest_amount, new_balance=new_balance)

    def withdraw(self, amount: float, description: str) -> float:
        """Debit ``amount`` and return the new balance."""
        if not _is_valid_amount(amount) or _cents(amount) <= 0:
            raise InvalidInputError("Withdrawal amount must be positive")
        amount = _cents(amount)
        cleaned = (description or "").strip()
        if not cleaned:
            raise InvalidInputError("Please provide a description")

        account = self._require_account()
        if amount > _cents(account.current_balance):
            raise InsufficientFundsError(requested=amount, available=account.current_balance)

        new_balance = _cents(account.current_balance - amount)
        self._record(account, new_balance, TransactionType.WITHDRAWAL, -amount, cleaned)
        return new_balance

    def apply_weekly_allowance_if_due(self) -> ScheduledCredit:
        """Credit the allowance only when ``is_weekly_allowance_due`` says so."""
        if not self.is_weekly_allowance_due():
            return ScheduledCredit(applied=False)
        return ScheduledCredit(applied=True, new_balance=self.apply_weekly_allowance())

    def apply_monthly_interest_if_due(self) -> ScheduledCredit:
        """Credit interest only when ``is_monthly_interest_due`` says so."""
        if not self.is_monthly_interest_due():
            return ScheduledCredit(applied=False)
        result = self.apply_monthly_interest()
        return ScheduledCredit(
            applied=True,
            new_balance=result.new_balance,
            interest_amount=result.interest_amount,
        )

    # Queries

    def list_transactions(self, limit: int = 20) -> list[Transaction]:
        """Return the newest ``limit`` ledger entries."""
        if limit < 1:
            raise InvalidInputError("limit must be >= 1")
        account = self.get_account()
        if account is None:
            return []
        return self.store.list_transactions(account.id, limit=limit)

    def current_balance(self) -> float:
        """Return the balance, or zero when no account exists."""
        account = self.get_account()
        return account.current_balance if account is not None else 0.0

    def is_weekly_allowance_due(self) -> bool:
        """True when no allowance was paid yet or the last one is >= 7 days old."""
        account = self.get_account()
        if account is None:
            return False

        last = self._latest(account, TransactionType.WEEKLY_ALLOWANCE)
        if last is None:
            return True
        return whole_days_between(last.created_at, self.clock()) >= WEEKLY_ALLOWANCE_INTERVAL_DAYS

    def is_monthly_interest_due(self) -> bool:
        """True on the first check of a new calendar month.

        Before any interest has been paid the account must be at least 30 days
        old instead.
        """
        account = self.get_account()
        if account is None:
            return False

        now = self.clock()
        last = self._latest(account, TransactionType.INTEREST)
        if last is None:
            return whole_days_between(account.created_at, now) >= MIN_ACCOUNT_AGE_FOR_INTEREST_DAYS
        return is_different_month(last.created_at, now)

    def reconcile(self) -> Reconciliation:
        """Compare the stored balance with the sum of the whole ledger.

        The ledger is read in pages because the backend caps rows per response.
        """
        account = self._require_account()
        amounts: list[float] = []
        while True:
            page = self.store.list_transactions(
                account.id, limit=RECONCILIATION_PAGE_SIZE, offset=len(amounts)
            )
            if not page:
                break
            amounts.extend(entry.amount for entry in page)
        ledger_total = math.fsum(amounts)
        difference = account.current_balance - ledger_total
        return Reconciliation(
            balance=account.current_balance,
            ledger_total=ledger_total,
            difference=difference,
            consistent=abs(difference) <= RECONCILIATION_TOLERANCE,
        )

    # Internals

    def _require_account(self) -> Account:
        account = self.get_account()
        if account is None:
            raise NotFoundError("Account")
        return account

    def _latest(self, account: Account, entry_type: TransactionType) -> Transaction | None:
        rows = self.store.list_transactions(account.id, limit=1, entry_type=entry_type)
        return rows[0] if rows else None

    def _record(
        self,
        account: Account,
        new_balance: float,
        entry_type: TransactionType,
        amount: float,
        description: str | None,
    ) -> None:
        """Persist the new balance, then append the matching ledger row.

        If the ledger insert fails the previous balance is restored before the
        error propagates.
        """
        self.store.update_account(
            account.id,
            {"current_balance": new_balance, "updated_at": self.clock().isoformat()},
        )
        try:
            self.store.insert_transaction(account.id, entry_type, amount, description)
        except BackendError:
            logger.error(
                "Ledger insert failed for %s %s; restoring balance %s",
                account.name,
                entry_type.value,
                account.current_balance,
            )
            self._restore_balance(account, new_balance)
            raise

        logger.info(
            "%s %s %.2f -> balance %.2f",
            account.name,
            entry_type.value,
            amount,
            new_balance,
        )

    def _restore_balance(self, account: Account, attempted_balance: float) -> None:
        try:
            self.store.update_account(
                account.id,
                {
                    "current_balance": account.current_balance,
                    "updated_at": self.clock().isoformat(),
                },
            )
        except BackendError:
            logger.exception(
                "Could not restore balance for %s: stored %s, ledger expects %s",
                account.name,
                attempted_balance,
                account.current_balance,
            )
