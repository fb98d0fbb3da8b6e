"""Monthly interest scheduled job."""

from __future__ import annotations

import logging

from pocket_money.services.factory import build_service

logger = logging.getLogger(__name__)


async def monthly_interest() -> None:
    """Credit monthly interest when a new month has started."""
    result = build_service().apply_monthly_interest_if_due()
    if result.applied:
        logger.info(
            "monthly_interest applied %.2f, balance now %.2f",
            result.interest_amount,
            result.new_balance,
        )
    else:
        logger.info("monthly_interest skipped, not due yet")
