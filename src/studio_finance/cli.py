"""Studio finance command line interface.

Usage:
    python -m studio_finance.cli report --tenant-id X [--json] [--pending-only]
    python -m studio_finance.cli project --tenant-id X --project-id Y [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from decimal import Decimal
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from studio_finance.calculators.types import payment_type_label
from studio_finance.config import configure_logging, get_settings
from studio_finance.database import dispose_db, get_session
from studio_finance.services.finance_service import (
    MemberProjectPayable,
    MemberSummary,
    TeamFinanceService,
)

logger = logging.getLogger(__name__)


def format_amount(amount: Decimal, currency: str) -> str:
    """Format an amount with thousands separators and no decimals."""
    return f"{currency}{amount:,.0f}"


def render_member_summaries(summaries: list[MemberSummary], currency: str) -> str:
    """Render member summaries as a plain-text report."""
    if not summaries:
        return "No team members found."

    blocks = []
    for item in summaries:
        member, summary = item.member, item.summary
        lines = [
            "---",
            f"Member: {member.display_name or member.member_id}",
            f"Member ID: {member.member_id}",
            f"Salary: {format_amount(member.rate, currency) if member.rate else 'Not set'}",
            f"Payment Type: {payment_type_label(member.payment_type)}",
            f"Total Payable: {format_amount(summary.payable, currency)}",
            f"Paid Amount: {format_amount(summary.paid, currency)}",
            f"Pending: {format_amount(summary.pending, currency)}",
        ]
        if summary.is_overpaid:
            lines.append(f"Overpaid by: {format_amount(-summary.balance, currency)}")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


def render_project_payables(payables: list[MemberProjectPayable], currency: str) -> str:
    """Render a project's team payables as a plain-text table."""
    if not payables:
        return "No team members assigned to this project."

    header = f"{'Member':<28} {'Type':<10} {'Events':>6} {'Months':>6} {'Payable':>12} {'Paid':>12} {'Pending':>12}"
    rows = [header, "-" * len(header)]
    for item in payables:
        b = item.breakdown
        rows.append(
            f"{(item.member.display_name or item.member.member_id)[:28]:<28} "
            f"{payment_type_label(item.member.payment_type):<10} "
            f"{b.event_count:>6} {b.unique_month_count:>6} "
            f"{format_amount(b.payable, currency):>12} "
            f"{format_amount(b.paid, currency):>12} "
            f"{format_amount(b.pending, currency):>12}"
        )
    return "\n".join(rows)


def summaries_to_json(summaries: list[MemberSummary]) -> list[dict[str, Any]]:
    return [
        {
            "member_id": s.member.member_id,
            "name": s.member.display_name,
            "payment_type": payment_type_label(s.member.payment_type),
            "salary": str(s.member.rate),
            "payable": str(s.summary.payable),
            "paid": str(s.summary.paid),
            "pending": str(s.summary.pending),
            "balance": str(s.summary.balance),
        }
        for s in summaries
    ]


def payables_to_json(payables: list[MemberProjectPayable]) -> list[dict[str, Any]]:
    return [
        {
            "member_id": p.member.member_id,
            "name": p.member.display_name,
            "event_count": p.breakdown.event_count,
            "unique_month_count": p.breakdown.unique_month_count,
            "payable": str(p.breakdown.payable),
            "paid": str(p.breakdown.paid),
            "pending": str(p.breakdown.pending),
        }
        for p in payables
    ]


class FinanceCli:
    """Studio finance command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m studio_finance.cli",
            description="Team finance reconciliation reports",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Logging level (default: LOG_LEVEL or INFO)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        report = subparsers.add_parser(
            "report",
            help="Payable/paid/pending for every team member of a tenant",
        )
        report.add_argument("--tenant-id", type=str, required=True, help="Tenant ID")
        report.add_argument("--json", action="store_true", help="Output JSON")
        report.add_argument(
            "--pending-only",
            action="store_true",
            help="Only list members with a pending amount",
        )

        project = subparsers.add_parser(
            "project",
            help="Team payables for one project, highest pending first",
        )
        project.add_argument("--tenant-id", type=str, required=True, help="Tenant ID")
        project.add_argument("--project-id", type=str, required=True, help="Project ID")
        project.add_argument("--json", action="store_true", help="Output JSON")

        return parser

    def run(self, argv: list[str] | None = None) -> int:
        """Run CLI with arguments."""
        args = self.parser.parse_args(argv)

        if not args.command:
            self.parser.print_help()
            return 1

        configure_logging(args.log_level)

        handlers: dict[str, Callable[[argparse.Namespace], Any]] = {
            "report": self._cmd_report,
            "project": self._cmd_project,
        }

        try:
            return asyncio.run(handlers[args.command](args))
        except (SQLAlchemyError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    async def _cmd_report(self, args: argparse.Namespace) -> int:
        try:
            async with get_session() as session:
                summaries = await TeamFinanceService(session).tenant_summaries(args.tenant_id)
        finally:
            await dispose_db()

        if args.pending_only:
            summaries = [s for s in summaries if s.summary.pending > 0]

        if args.json:
            print(json.dumps(summaries_to_json(summaries), indent=2))
        else:
            print(render_member_summaries(summaries, get_settings().currency_symbol))
        return 0

    async def _cmd_project(self, args: argparse.Namespace) -> int:
        try:
            async with get_session() as session:
                payables = await TeamFinanceService(session).project_team_payables(
                    args.tenant_id, args.project_id
                )
        finally:
            await dispose_db()

        if args.json:
            print(json.dumps(payables_to_json(payables), indent=2))
        else:
            print(render_project_payables(payables, get_settings().currency_symbol))
        return 0


def main() -> int:
    """CLI entry point."""
    return FinanceCli().run()


if __name__ == "__main__":
    sys.exit(main())
