"""Parent page data and form actions."""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Form

from pocket_money.config import settings
from pocket_money.dependencies import get_parent_user, get_service
from pocket_money.services.pocket_money_service import PocketMoneyService
from pocket_money.utils.errors import InvalidInputError

router = APIRouter(dependencies=[Depends(get_parent_user)])


def _parse_number(raw: str | None) -> float | None:
    """Parse a form field as a finite float, returning None when invalid."""
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@router.get("/")
def load_page(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Return the account (creating it on first visit) and recent history."""
    account = service.get_or_create()
    transactions = service.list_transactions(settings.transaction_history_limit)
    return {
        "account": account.model_dump(mode="json"),
        "transactions": [entry.model_dump(mode="json") for entry in transactions],
    }


@router.post("/actions/withdraw")
def withdraw(
    amount: str | None = Form(default=None),
    description: str | None = Form(default=None),
    service: PocketMoneyService = Depends(get_service),
) -> dict:
    """Record a withdrawal."""
    value = _parse_number(amount)
    if not value or value <= 0:
        raise InvalidInputError("Please enter a valid amount")
    if not description or not description.strip():
        raise InvalidInputError("Please provide a description")

    new_balance = service.withdraw(value, description.strip())
    return {"success": True, "newBalance": new_balance}


@router.post("/actions/update-settings")
def update_settings(
    weekly_allowance: str | None = Form(default=None, alias="weeklyAllowance"),
    interest_rate: str | None = Form(default=None, alias="interestRate"),
    service: PocketMoneyService = Depends(get_service),
) -> dict:
    """Update the weekly allowance and the interest rate (given in percent)."""
    allowance = _parse_number(weekly_allowance)
    if allowance is None or allowance < 0:
        raise InvalidInputError("Please enter a valid weekly allowance")

    rate_percent = _parse_number(interest_rate)
    if rate_percent is None or rate_percent < 0:
        raise InvalidInputError("Please enter a valid interest rate")

    service.update_settings(weekly_allowance=allowance, interest_rate=rate_percent / 100)
    return {"success": True, "message": "Settings updated successfully"}


@router.post("/actions/add-weekly-allowance")
def add_weekly_allowance(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Credit the weekly allowance now, regardless of when it was last paid."""
    new_balance = service.apply_weekly_allowance()
    return {
        "success": True,
        "newBalance": new_balance,
        "message": "Weekly allowance added successfully",
    }


@router.post("/actions/add-interest")
def add_interest(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Credit monthly interest now, regardless of when it was last paid."""
    result = service.apply_monthly_interest()
    return {
        "success": True,
        "newBalance": result.new_balance,
        "interestAmount": result.interest_amount,
        "message": "Monthly interest added successfully",
    }
