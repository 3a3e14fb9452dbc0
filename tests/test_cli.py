"""Tests for the finance report CLI."""

import json
from contextlib import asynccontextmanager
from decimal import Decimal

import pytest

from studio_finance.calculators.reconciliation import FinanceReconciliationEngine
from studio_finance.calculators.types import (
    EventAssignment,
    MemberPolicy,
    PaymentRecord,
)
from studio_finance.cli import (
    FinanceCli,
    format_amount,
    payables_to_json,
    render_member_summaries,
    render_project_payables,
    summaries_to_json,
)
from studio_finance.config import get_settings
from studio_finance.services.finance_service import (
    MemberProjectPayable,
    MemberSummary,
    TeamFinanceService,
)

ANITA = MemberPolicy("mem_anita", "per-event", "5000", display_name="Anita Rao")
KIRAN = MemberPolicy("mem_kiran", None, None, display_name="Kiran Das")

ASSIGNMENTS = [
    EventAssignment("ev1", "proj_sharma", "2024-01-05", frozenset({"mem_anita", "mem_kiran"})),
    EventAssignment("ev2", "proj_sharma", "2024-01-20", frozenset({"mem_anita"})),
]
PAYMENTS = [
    PaymentRecord(Decimal("4000"), "mem_anita", "proj_sharma"),
    PaymentRecord(Decimal("1500"), "mem_kiran", "proj_sharma"),
]


@pytest.fixture
def summaries() -> list[MemberSummary]:
    engine = FinanceReconciliationEngine
    return [
        MemberSummary(ANITA, engine.compute_aggregate(ANITA, ASSIGNMENTS, PAYMENTS)),
        MemberSummary(KIRAN, engine.compute_aggregate(KIRAN, ASSIGNMENTS, PAYMENTS)),
    ]


@pytest.fixture
def payables() -> list[MemberProjectPayable]:
    engine = FinanceReconciliationEngine
    return [
        MemberProjectPayable(
            member, engine.compute_project_breakdown(member, "proj_sharma", ASSIGNMENTS, PAYMENTS)
        )
        for member in (ANITA, KIRAN)
    ]


class TestFormatting:
    def test_format_amount(self):
        assert format_amount(Decimal("150000"), "₹") == "₹150,000"
        assert format_amount(Decimal("0"), "$") == "$0"

    def test_render_member_summaries(self, summaries):
        text = render_member_summaries(summaries, "₹")

        assert "Member: Anita Rao" in text
        assert "Payment Type: Per Event" in text
        assert "Total Payable: ₹10,000" in text
        assert "Paid Amount: ₹4,000" in text
        assert "Pending: ₹6,000" in text

    def test_member_without_policy(self, summaries):
        text = render_member_summaries(summaries[1:], "₹")

        assert "Salary: Not set" in text
        assert "Payment Type: Not set" in text
        assert "Overpaid by: ₹1,500" in text

    def test_no_members(self):
        assert render_member_summaries([], "₹") == "No team members found."

    def test_render_project_payables(self, payables):
        lines = render_project_payables(payables, "₹").splitlines()

        assert lines[0].startswith("Member")
        assert lines[2].startswith("Anita Rao")
        assert "₹6,000" in lines[2]
        assert lines[3].startswith("Kiran Das")

    def test_no_project_members(self):
        assert render_project_payables([], "₹") == "No team members assigned to this project."


class TestJsonOutput:
    def test_summaries_to_json(self, summaries):
        data = summaries_to_json(summaries)

        assert data[0]["member_id"] == "mem_anita"
        assert data[0]["pending"] == "6000.00"
        assert data[1]["payment_type"] == "Not set"
        assert data[1]["balance"] == "-1500.00"
        json.dumps(data)

    def test_payables_to_json(self, payables):
        data = payables_to_json(payables)

        assert data[0]["event_count"] == 2
        assert data[0]["payable"] == "10000.00"
        assert data[1]["payable"] == "0"


class TestParser:
    def test_report_arguments(self):
        args = FinanceCli().parser.parse_args(
            ["report", "--tenant-id", "tenant_lumiere", "--json", "--pending-only"]
        )

        assert args.command == "report"
        assert args.tenant_id == "tenant_lumiere"
        assert args.json
        assert args.pending_only

    def test_project_arguments(self):
        args = FinanceCli().parser.parse_args(
            ["--log-level", "debug", "project", "--tenant-id", "t", "--project-id", "p"]
        )

        assert args.command == "project"
        assert args.project_id == "p"
        assert args.log_level == "debug"
        assert not args.json

    def test_tenant_id_required(self):
        with pytest.raises(SystemExit):
            FinanceCli().parser.parse_args(["report"])

    def test_no_command_prints_help(self, capsys):
        assert FinanceCli().run([]) == 1
        assert "report" in capsys.readouterr().out


@pytest.fixture
def unreachable_database(monkeypatch):
    """Point settings at a port nothing listens on."""
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@127.0.0.1:1/db")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def stub_database(monkeypatch, summaries):
    """Serve tenant summaries without a database."""

    @asynccontextmanager
    async def fake_session():
        yield None

    async def no_dispose():
        return None

    async def fake_tenant_summaries(self, tenant_id):
        return summaries

    monkeypatch.setattr("studio_finance.cli.get_session", fake_session)
    monkeypatch.setattr("studio_finance.cli.dispose_db", no_dispose)
    monkeypatch.setattr(TeamFinanceService, "tenant_summaries", fake_tenant_summaries)


class TestRun:
    def test_report_pending_only(self, stub_database, capsys):
        exit_code = FinanceCli().run(["report", "--tenant-id", "t1", "--json", "--pending-only"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert [row["member_id"] for row in data] == ["mem_anita"]

    def test_report_text(self, stub_database, capsys):
        exit_code = FinanceCli().run(["report", "--tenant-id", "t1"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Member: Anita Rao" in out
        assert "Member: Kiran Das" in out

    def test_unreachable_database(self, unreachable_database, capsys):
        exit_code = FinanceCli().run(["report", "--tenant-id", "t1"])

        assert exit_code == 1
        assert capsys.readouterr().err.startswith("Error:")
