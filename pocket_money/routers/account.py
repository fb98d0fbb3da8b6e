"""Account history and reconciliation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pocket_money.dependencies import get_family_user, get_parent_user, get_service
from pocket_money.services.pocket_money_service import PocketMoneyService

router = APIRouter()


@router.get("/transactions", dependencies=[Depends(get_family_user)])
def list_transactions(
    limit: int = Query(default=20, ge=1, le=200),
    service: PocketMoneyService = Depends(get_service),
) -> dict:
    """Return the newest ledger entries."""
    entries = service.list_transactions(limit)
    return {
        "transactions": [entry.model_dump(mode="json") for entry in entries],
        "currentBalance": service.current_balance(),
    }


@router.get("/reconciliation", dependencies=[Depends(get_parent_user)])
def reconciliation(service: PocketMoneyService = Depends(get_service)) -> dict:
    """Compare the stored balance with the ledger total."""
    return service.reconcile().model_dump()
