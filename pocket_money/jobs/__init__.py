"""Background job modules for periodic pocket money credits."""

from pocket_money.jobs.monthly_interest import monthly_interest
from pocket_money.jobs.weekly_allowance import weekly_allowance

__all__ = [
    "monthly_interest",
    "weekly_allowance",
]
