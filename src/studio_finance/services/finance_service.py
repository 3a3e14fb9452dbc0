"""Team finance views backed by the reconciliation engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from studio_finance.calculators.reconciliation import FinanceReconciliationEngine
from studio_finance.calculators.types import (
    MemberFinanceStatement,
    MemberPolicy,
    PayableSummary,
    ProjectPayableBreakdown,
)
from studio_finance.services.snapshot_service import FinanceSnapshotLoader

logger = logging.getLogger(__name__)


@dataclass
class MemberProjectPayable:
    """A member's standing on one project."""

    member: MemberPolicy
    breakdown: ProjectPayableBreakdown


@dataclass
class MemberSummary:
    """A member's aggregate standing."""

    member: MemberPolicy
    summary: PayableSummary


class TeamFinanceService:
    """Reconciliation views for one request.

    Each method loads a fresh snapshot through FinanceSnapshotLoader and
    hands it to FinanceReconciliationEngine. Nothing is cached between
    calls.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.loader = FinanceSnapshotLoader(session)
        self.engine = FinanceReconciliationEngine

    async def pending_payable(self, tenant_id: str, member_id: str) -> PayableSummary:
        """Aggregate payable/paid/pending for a member's pending card."""
        snapshot = await self.loader.load_member_snapshot(tenant_id, member_id)
        summary = self.engine.compute_aggregate(
            snapshot.member, snapshot.assignments, snapshot.payments
        )
        logger.info(
            "Reconciled member %s (tenant %s): payable=%s paid=%s pending=%s",
            member_id,
            tenant_id,
            summary.payable,
            summary.paid,
            summary.pending,
        )
        if summary.is_overpaid:
            logger.warning(
                "Member %s (tenant %s) is overpaid by %s",
                member_id,
                tenant_id,
                -summary.balance,
            )
        return summary

    async def project_pending_hint(
        self, tenant_id: str, member_id: str, project_id: str
    ) -> ProjectPayableBreakdown:
        """Pending amount for a member on a project, shown before a payment is entered."""
        snapshot = await self.loader.load_member_snapshot(tenant_id, member_id)
        breakdown = self.engine.compute_project_breakdown(
            snapshot.member, project_id, snapshot.assignments, snapshot.payments
        )
        logger.info(
            "Project hint for member %s on %s (tenant %s): events=%d pending=%s",
            member_id,
            project_id,
            tenant_id,
            breakdown.event_count,
            breakdown.pending,
        )
        return breakdown

    async def member_statement(self, tenant_id: str, member_id: str) -> MemberFinanceStatement:
        """Summary, ranked project breakdowns and payment history for a member."""
        snapshot = await self.loader.load_member_snapshot(tenant_id, member_id)
        statement = self.engine.build_statement(
            snapshot.member, snapshot.assignments, snapshot.payments
        )
        logger.info(
            "Built statement for member %s (tenant %s): %d projects, pending=%s",
            member_id,
            tenant_id,
            len(statement.breakdowns),
            statement.summary.pending,
        )
        return statement

    async def project_team_payables(
        self, tenant_id: str, project_id: str
    ) -> list[MemberProjectPayable]:
        """Every member assigned to the project, highest pending first."""
        snapshot = await self.loader.load_project_snapshot(tenant_id, project_id)
        if not snapshot.members:
            logger.info("No team members assigned to project %s (tenant %s)", project_id, tenant_id)
            return []

        payables = [
            MemberProjectPayable(
                member=member,
                breakdown=self.engine.compute_project_breakdown(
                    member, project_id, snapshot.assignments, snapshot.payments
                ),
            )
            for member in snapshot.members
        ]
        # Same ordering as rank_project_breakdowns, keeping the member alongside
        payables.sort(key=lambda p: p.breakdown.pending, reverse=True)
        logger.info(
            "Reconciled project %s (tenant %s) for %d members",
            project_id,
            tenant_id,
            len(payables),
        )
        return payables

    async def tenant_summaries(self, tenant_id: str) -> list[MemberSummary]:
        """Aggregate standing of every member in the tenant."""
        snapshot = await self.loader.load_tenant_snapshot(tenant_id)
        return [
            MemberSummary(
                member=member,
                summary=self.engine.compute_aggregate(
                    member, snapshot.assignments, snapshot.payments
                ),
            )
            for member in snapshot.members
        ]
