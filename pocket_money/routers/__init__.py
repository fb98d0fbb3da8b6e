"""API router package."""

from pocket_money.routers import account, auth, page, scheduled

__all__ = [
    "account",
    "auth",
    "page",
    "scheduled",
]
