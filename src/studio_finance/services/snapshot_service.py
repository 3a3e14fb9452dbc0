"""Tenant-scoped data loading for reconciliation.

Everything the engine needs for one view is read inside a single session,
so a reconciliation never mixes data from different points in time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from studio_finance.calculators.types import EventAssignment, MemberPolicy, PaymentRecord
from studio_finance.models import ClientEvent, ClientEventMember, Expense, TeamMember

logger = logging.getLogger(__name__)


class FinanceLookupError(Exception):
    """Base error for records missing from the tenant's data."""


class MemberNotFoundError(FinanceLookupError):
    """Raised when a team member does not exist in the tenant."""

    def __init__(self, tenant_id: str, member_id: str):
        self.tenant_id = tenant_id
        self.member_id = member_id
        super().__init__(f"Team member {member_id} not found in tenant {tenant_id}")


@dataclass
class FinanceSnapshot:
    """One member's policy, assignments and payments."""

    member: MemberPolicy
    assignments: list[EventAssignment] = field(default_factory=list)
    payments: list[PaymentRecord] = field(default_factory=list)


@dataclass
class GroupSnapshot:
    """Several members with the assignments and payments that concern them."""

    members: list[MemberPolicy] = field(default_factory=list)
    assignments: list[EventAssignment] = field(default_factory=list)
    payments: list[PaymentRecord] = field(default_factory=list)


class FinanceSnapshotLoader:
    """Loads engine inputs from the database for one tenant."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_member_snapshot(self, tenant_id: str, member_id: str) -> FinanceSnapshot:
        """Load a member with every event they are assigned to and their payments.

        Raises:
            MemberNotFoundError: If the member is not part of the tenant
        """
        member = await self._get_member(tenant_id, member_id)
        if member is None:
            raise MemberNotFoundError(tenant_id, member_id)

        events = await self._get_member_events(tenant_id, member_id)
        expenses = await self._get_expenses(tenant_id, Expense.member_id == member_id)

        logger.debug(
            "Loaded snapshot for member %s (tenant %s): %d events, %d payments",
            member_id,
            tenant_id,
            len(events),
            len(expenses),
        )
        return FinanceSnapshot(
            member=member.to_policy(),
            assignments=[e.to_assignment() for e in events],
            payments=[e.to_payment() for e in expenses],
        )

    async def load_project_snapshot(self, tenant_id: str, project_id: str) -> GroupSnapshot:
        """Load a project's events, the members assigned to them and their project payments."""
        result = await self.session.execute(
            select(ClientEvent)
            .where(
                ClientEvent.tenant_id == tenant_id,
                ClientEvent.project_id == project_id,
            )
            .options(selectinload(ClientEvent.assignments))
            .order_by(ClientEvent.event_date, ClientEvent.client_event_id)
        )
        events = list(result.scalars().all())

        member_ids: list[str] = []
        for event in events:
            for assignment in event.assignments:
                if assignment.member_id not in member_ids:
                    member_ids.append(assignment.member_id)

        members = await self._get_members(tenant_id, member_ids)
        expenses = await self._get_expenses(
            tenant_id,
            Expense.project_id == project_id,
            Expense.member_id.is_not(None),
        )

        logger.debug(
            "Loaded project %s (tenant %s): %d events, %d members",
            project_id,
            tenant_id,
            len(events),
            len(members),
        )
        return GroupSnapshot(
            members=[m.to_policy() for m in members],
            assignments=[e.to_assignment() for e in events],
            payments=[e.to_payment() for e in expenses],
        )

    async def load_tenant_snapshot(self, tenant_id: str) -> GroupSnapshot:
        """Load every member, event and member payment of a tenant."""
        members = await self._get_members(tenant_id)
        result = await self.session.execute(
            select(ClientEvent)
            .where(ClientEvent.tenant_id == tenant_id)
            .options(selectinload(ClientEvent.assignments))
            .order_by(ClientEvent.event_date, ClientEvent.client_event_id)
        )
        events = list(result.scalars().all())
        expenses = await self._get_expenses(tenant_id, Expense.member_id.is_not(None))

        return GroupSnapshot(
            members=[m.to_policy() for m in members],
            assignments=[e.to_assignment() for e in events],
            payments=[e.to_payment() for e in expenses],
        )

    # === Data Loading Methods ===

    async def _get_member(self, tenant_id: str, member_id: str) -> TeamMember | None:
        result = await self.session.execute(
            select(TeamMember).where(
                TeamMember.tenant_id == tenant_id,
                TeamMember.member_id == member_id,
            )
        )
        return result.scalar_one_or_none()

    async def _get_members(
        self, tenant_id: str, member_ids: list[str] | None = None
    ) -> list[TeamMember]:
        """Members of the tenant, optionally restricted (and ordered) by id."""
        query = select(TeamMember).where(TeamMember.tenant_id == tenant_id)
        if member_ids is not None:
            if not member_ids:
                return []
            query = query.where(TeamMember.member_id.in_(member_ids))
        else:
            query = query.order_by(TeamMember.first_name, TeamMember.last_name)

        result = await self.session.execute(query)
        members = list(result.scalars().all())
        if member_ids is not None:
            position = {member_id: i for i, member_id in enumerate(member_ids)}
            members.sort(key=lambda m: position[m.member_id])
        return members

    async def _get_member_events(self, tenant_id: str, member_id: str) -> list[ClientEvent]:
        result = await self.session.execute(
            select(ClientEvent)
            .join(ClientEventMember)
            .where(
                ClientEvent.tenant_id == tenant_id,
                ClientEventMember.member_id == member_id,
            )
            .options(selectinload(ClientEvent.assignments))
            .order_by(ClientEvent.event_date, ClientEvent.client_event_id)
        )
        return list(result.scalars().all())

    async def _get_expenses(self, tenant_id: str, *criteria) -> list[Expense]:
        result = await self.session.execute(
            select(Expense)
            .where(Expense.tenant_id == tenant_id, *criteria)
            .order_by(Expense.date, Expense.expense_id)
        )
        return list(result.scalars().all())
