"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from pocket_money.config import settings
from pocket_money.jobs.monthly_interest import monthly_interest
from pocket_money.jobs.weekly_allowance import weekly_allowance

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register the periodic credit jobs if not already present."""
    if scheduler.get_job("weekly_allowance") is None:
        scheduler.add_job(
            weekly_allowance,
            CronTrigger(
                day_of_week=settings.weekly_allowance_cron_day_of_week,
                hour=settings.weekly_allowance_cron_hour,
                minute=0,
                timezone=settings.timezone,
            ),
            id="weekly_allowance",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    if scheduler.get_job("monthly_interest") is None:
        scheduler.add_job(
            monthly_interest,
            CronTrigger(
                day=settings.monthly_interest_cron_day,
                hour=settings.monthly_interest_cron_hour,
                minute=5,
                timezone=settings.timezone,
            ),
            id="monthly_interest",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
