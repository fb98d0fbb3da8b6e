"""Account and ledger schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class TransactionType(str, Enum):
    """Closed set of ledger entry types."""

    WEEKLY_ALLOWANCE = "weekly_allowance"
    INTEREST = "interest"
    WITHDRAWAL = "withdrawal"
    ALLOWANCE_CHANGE = "allowance_change"
    INTEREST_RATE_CHANGE = "interest_rate_change"


class Account(BaseModel):
    """A child's account row (``kids`` table)."""

    id: int
    name: str
    weekly_allowance: float = 0.0
    interest_rate: float = 0.0
    current_balance: float = 0.0
    created_at: datetime
    updated_at: datetime


class Transaction(BaseModel):
    """A single immutable ledger entry (``transactions`` table)."""

    id: int
    kid_id: int
    type: TransactionType
    amount: float
    description: str | None = None
    created_at: datetime


class InterestResult(BaseModel):
    """Outcome of a monthly interest payment."""

    interest_amount: float
    new_balance: float


class ScheduledCredit(BaseModel):
    """Outcome of an apply-if-due call."""

    applied: bool
    new_balance: float | None = None
    interest_amount: float | None = None


class Reconciliation(BaseModel):
    """Balance vs. ledger comparison."""

    balance: float
    ledger_total: float
    difference: float
    consistent: bool
