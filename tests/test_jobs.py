"""Scheduled job tests."""

from __future__ import annotations

import asyncio
import importlib

import pytest

from pocket_money.jobs.scheduler import register_jobs, scheduler

# The package re-exports the job functions under the module names.
weekly_allowance_module = importlib.import_module("pocket_money.jobs.weekly_allowance")
monthly_interest_module = importlib.import_module("pocket_money.jobs.monthly_interest")


@pytest.fixture
def patched_service(service, monkeypatch):
    monkeypatch.setattr(weekly_allowance_module, "build_service", lambda: service)
    monkeypatch.setattr(monthly_interest_module, "build_service", lambda: service)
    service.get_or_create()
    return service


def test_weekly_job_applies_only_when_due(patched_service) -> None:
    """Running the job twice in a row credits once."""
    asyncio.run(weekly_allowance_module.weekly_allowance())
    asyncio.run(weekly_allowance_module.weekly_allowance())

    assert patched_service.current_balance() == 10


def test_monthly_job_waits_for_account_age(patched_service, clock) -> None:
    """Interest is skipped for a young account and paid once it is old enough."""
    patched_service.apply_weekly_allowance()

    asyncio.run(monthly_interest_module.monthly_interest())
    assert patched_service.current_balance() == 10

    clock.advance(days=30)
    asyncio.run(monthly_interest_module.monthly_interest())
    assert patched_service.current_balance() == pytest.approx(10.1)


def test_register_jobs_is_idempotent() -> None:
    """Both cron jobs are registered exactly once."""
    register_jobs()
    register_jobs()

    job_ids = sorted(job.id for job in scheduler.get_jobs())
    assert job_ids == ["monthly_interest", "weekly_allowance"]
