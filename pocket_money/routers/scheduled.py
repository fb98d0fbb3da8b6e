"""Weekly allowance and monthly interest endpoints for periodic callers.

``POST`` applies the credit only when it is due; ``GET`` reports due status and
never mutates.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from pocket_money.dependencies import get_service
from pocket_money.services.pocket_money_service import PocketMoneyService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/weekly-allowance")
def add_weekly_allowance(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Credit the weekly allowance if seven days have passed."""
    result = service.apply_weekly_allowance_if_due()
    if not result.applied:
        return {"success": False, "message": "Weekly allowance is not due yet"}

    logger.info("Scheduled weekly allowance applied")
    return {
        "success": True,
        "message": "Weekly allowance added successfully",
        "newBalance": result.new_balance,
    }


@router.get("/weekly-allowance")
def weekly_allowance_status(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Report whether the weekly allowance is due."""
    is_due = service.is_weekly_allowance_due()
    account = service.get_account()
    return {
        "isDue": is_due,
        "currentBalance": account.current_balance if account else 0,
        "weeklyAllowance": account.weekly_allowance if account else 0,
    }


@router.post("/monthly-interest")
def add_monthly_interest(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Credit monthly interest if a new month has started."""
    result = service.apply_monthly_interest_if_due()
    if not result.applied:
        return {"success": False, "message": "Monthly interest is not due yet"}

    logger.info("Scheduled monthly interest applied")
    return {
        "success": True,
        "message": "Monthly interest added successfully",
        "interestAmount": result.interest_amount,
        "newBalance": result.new_balance,
    }


@router.get("/monthly-interest")
def monthly_interest_status(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Report whether monthly interest is due and what it would pay."""
    is_due = service.is_monthly_interest_due()
    account = service.get_account()
    return {
        "isDue": is_due,
        "currentBalance": account.current_balance if account else 0,
        "interestRate": account.interest_rate if account else 0,
        "potentialInterest": (
            round(account.current_balance * account.interest_rate, 2) if account else 0
        ),
    }
