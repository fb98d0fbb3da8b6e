"""Weekly allowance scheduled job."""

from __future__ import annotations

import logging

from pocket_money.services.factory import build_service

logger = logging.getLogger(__name__)


async def weekly_allowance() -> None:
    """Credit the weekly allowance when it is due."""
    result = build_service().apply_weekly_allowance_if_due()
    if result.applied:
        logger.info("weekly_allowance applied, balance now %.2f", result.new_balance)
    else:
        logger.info("weekly_allowance skipped, not due yet")
