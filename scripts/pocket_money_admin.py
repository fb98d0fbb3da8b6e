"""Inspect and initialise the pocket money account from the command line."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Inspect the pocket money account stored in Supabase.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show balance, due flags and reconciliation.")

    history = subparsers.add_parser("history", help="List recent transactions.")
    history.add_argument(
        "--limit",
        type=int,
        default=10,
        help="How many transactions to show (default: 10).",
    )

    init = subparsers.add_parser("init", help="Create the account if it does not exist.")
    init.add_argument("--weekly-allowance", type=float, default=None)
    init.add_argument(
        "--interest-rate",
        type=float,
        default=None,
        help="Monthly interest rate as a decimal, e.g. 0.01 for 1%%.",
    )
    return parser.parse_args(argv)


def format_status(service) -> list[str]:
    """Return printable status lines for the configured account."""
    account = service.get_account()
    if account is None:
        return [f"No account named {service.account_name!r} yet. Run `init` to create it."]

    reconciliation = service.reconcile()
    lines = [
        f"Account: {account.name} (id={account.id})",
        f"Balance: {account.current_balance:.2f}",
        f"Weekly allowance: {account.weekly_allowance:.2f}",
        f"Interest rate: {account.interest_rate * 100:.2f}% per month",
        f"Weekly allowance {'DUE' if service.is_weekly_allowance_due() else 'NOT DUE'}",
        f"Monthly interest {'DUE' if service.is_monthly_interest_due() else 'NOT DUE'}",
        f"Ledger total: {reconciliation.ledger_total:.2f}",
    ]
    if not reconciliation.consistent:
        lines.append(f"WARNING: balance differs from ledger by {reconciliation.difference:.2f}")
    return lines


def format_history(service, limit: int) -> list[str]:
    """Return printable lines for the newest transactions."""
    entries = service.list_transactions(limit)
    if not entries:
        return ["No transactions found"]

    lines: list[str] = []
    for entry in entries:
        lines.append(f"- {entry.type.value}: {entry.amount:.2f} at {entry.created_at.isoformat()}")
        if entry.description:
            lines.append(f"  {entry.description}")
    return lines


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)

    from pocket_money.services.factory import build_service

    service = build_service()
    if args.command == "status":
        lines = format_status(service)
    elif args.command == "history":
        lines = format_history(service, args.limit)
    else:
        account = service.get_or_create(
            weekly_allowance=args.weekly_allowance,
            interest_rate=args.interest_rate,
        )
        lines = [f"Account ready: {account.name} (id={account.id})"]

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
