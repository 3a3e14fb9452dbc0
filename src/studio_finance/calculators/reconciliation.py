"""Team member payable/paid/pending reconciliation."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from studio_finance.calculators.amounts import ZERO, month_key, round_to_cents, sort_timestamp
from studio_finance.calculators.types import (
    EventAssignment,
    MemberFinanceStatement,
    MemberPolicy,
    PayableSummary,
    PaymentRecord,
    PaymentType,
    ProjectPayableBreakdown,
    as_assignments,
    as_payments,
)


class FinanceReconciliationEngine:
    """Computes what a studio owes a team member.

    Payable rules (per project):
    - per-event: salary x distinct events the member is assigned to
    - per-month: salary x distinct calendar (year, month) pairs across
      those events; events without a readable date are skipped
    - no policy or no salary: payable is zero

    Paid is the sum of the member's payment records. A record without a
    project counts toward the aggregate only. Pending is payable minus
    paid, floored at zero; the signed value is exposed as ``balance``.

    All methods are pure: inputs are never mutated and nothing is cached.
    """

    @staticmethod
    def member_assignments(
        member: MemberPolicy, assignments: Iterable[EventAssignment] | None
    ) -> list[EventAssignment]:
        """Assignments that include the member, one per (project, event)."""
        seen: set[tuple[str | None, str]] = set()
        result: list[EventAssignment] = []
        for assignment in as_assignments(assignments):
            if not assignment.is_assigned(member.member_id):
                continue
            key = (assignment.project_id, assignment.event_id)
            if key in seen:
                continue
            seen.add(key)
            result.append(assignment)
        return result

    @staticmethod
    def member_payments(
        member: MemberPolicy, payments: Iterable[PaymentRecord] | None
    ) -> list[PaymentRecord]:
        return [
            p
            for p in as_payments(payments)
            if p.member_id is not None and p.member_id == member.member_id
        ]

    @staticmethod
    def unique_months(assignments: Iterable[EventAssignment]) -> set[tuple[int, int]]:
        months: set[tuple[int, int]] = set()
        for assignment in assignments:
            key = month_key(assignment.event_date)
            if key is not None:
                months.add(key)
        return months

    @staticmethod
    def payable_for(member: MemberPolicy, event_count: int, month_count: int) -> Decimal:
        """Payable for one project given its event and month counts."""
        if not member.has_policy:
            return ZERO
        if member.policy is PaymentType.PER_EVENT:
            return round_to_cents(member.rate * event_count)
        if member.policy is PaymentType.PER_MONTH:
            return round_to_cents(member.rate * month_count)
        return ZERO

    @staticmethod
    def sum_payments(payments: Iterable[PaymentRecord]) -> Decimal:
        total = ZERO
        for payment in payments:
            total += payment.value
        return round_to_cents(total)

    @classmethod
    def _breakdown(
        cls,
        member: MemberPolicy,
        project_id: str | None,
        project_assignments: list[EventAssignment],
        project_payments: list[PaymentRecord],
    ) -> ProjectPayableBreakdown:
        months = cls.unique_months(project_assignments)
        payable = cls.payable_for(member, len(project_assignments), len(months))
        paid = cls.sum_payments(project_payments)
        return ProjectPayableBreakdown(
            project_id=project_id,
            event_count=len(project_assignments),
            unique_month_count=len(months),
            payable=payable,
            paid=paid,
            pending=max(payable - paid, ZERO),
        )

    @classmethod
    def compute_project_breakdown(
        cls,
        member: MemberPolicy,
        project_id: str | None,
        assignments: Iterable[EventAssignment] | None,
        payments: Iterable[PaymentRecord] | None,
    ) -> ProjectPayableBreakdown:
        """Payable/paid/pending for the member on a single project.

        Used for the pending-amount hint shown before a payment is entered.
        """
        project_assignments = [
            a for a in cls.member_assignments(member, assignments) if a.project_id == project_id
        ]
        project_payments = [
            p
            for p in cls.member_payments(member, payments)
            if p.project_id is not None and p.project_id == project_id
        ]
        return cls._breakdown(member, project_id, project_assignments, project_payments)

    @classmethod
    def compute_member_breakdowns(
        cls,
        member: MemberPolicy,
        all_assignments: Iterable[EventAssignment] | None,
        all_payments: Iterable[PaymentRecord] | None,
    ) -> list[ProjectPayableBreakdown]:
        """One breakdown per project the member is assigned to.

        Projects appear in the order their first assignment appears.
        Payments on projects without an assignment are not listed.
        """
        grouped: dict[str | None, list[EventAssignment]] = {}
        for assignment in cls.member_assignments(member, all_assignments):
            grouped.setdefault(assignment.project_id, []).append(assignment)

        paid_by_project: dict[str, list[PaymentRecord]] = {}
        for payment in cls.member_payments(member, all_payments):
            if payment.project_id is not None:
                paid_by_project.setdefault(payment.project_id, []).append(payment)

        return [
            cls._breakdown(
                member,
                project_id,
                project_assignments,
                paid_by_project.get(project_id, []) if project_id is not None else [],
            )
            for project_id, project_assignments in grouped.items()
        ]

    @classmethod
    def compute_aggregate(
        cls,
        member: MemberPolicy,
        all_assignments: Iterable[EventAssignment] | None,
        all_payments: Iterable[PaymentRecord] | None,
    ) -> PayableSummary:
        """Aggregate payable/paid/pending for the member.

        Payable is the sum of per-project payables. Paid includes general
        payments that are not tied to any project.
        """
        payments = as_payments(all_payments)
        breakdowns = cls.compute_member_breakdowns(member, all_assignments, payments)
        payable = ZERO
        for breakdown in breakdowns:
            payable += breakdown.payable
        paid = cls.sum_payments(cls.member_payments(member, payments))
        return PayableSummary(
            member_id=member.member_id,
            payable=payable,
            paid=paid,
            pending=max(payable - paid, ZERO),
            project_count=len(breakdowns),
        )

    @staticmethod
    def rank_project_breakdowns(
        breakdowns: Iterable[ProjectPayableBreakdown],
    ) -> list[ProjectPayableBreakdown]:
        """Highest pending first; ties keep their input order."""
        return sorted(breakdowns, key=lambda b: b.pending, reverse=True)

    @staticmethod
    def newest_first(payments: Iterable[PaymentRecord]) -> list[PaymentRecord]:
        """Order payments newest first; undated payments go last."""
        dated = []
        undated = []
        for payment in payments:
            if sort_timestamp(payment.payment_date) is None:
                undated.append(payment)
            else:
                dated.append(payment)
        dated.sort(key=lambda p: sort_timestamp(p.payment_date), reverse=True)
        return dated + undated

    @classmethod
    def general_payments(
        cls, member: MemberPolicy, all_payments: Iterable[PaymentRecord] | None
    ) -> list[PaymentRecord]:
        """The member's payments that are not tied to a project."""
        return cls.newest_first(
            p for p in cls.member_payments(member, all_payments) if p.project_id is None
        )

    @classmethod
    def build_statement(
        cls,
        member: MemberPolicy,
        all_assignments: Iterable[EventAssignment] | None,
        all_payments: Iterable[PaymentRecord] | None,
    ) -> MemberFinanceStatement:
        """Summary, ranked project breakdowns and payment history."""
        assignments = as_assignments(all_assignments)
        payments = as_payments(all_payments)

        breakdowns = cls.compute_member_breakdowns(member, assignments, payments)
        member_payments = cls.member_payments(member, payments)
        project_payments = {
            b.project_id: cls.newest_first(
                p for p in member_payments
                if p.project_id is not None and p.project_id == b.project_id
            )
            for b in breakdowns
        }

        return MemberFinanceStatement(
            member=member,
            summary=cls.compute_aggregate(member, assignments, payments),
            breakdowns=cls.rank_project_breakdowns(breakdowns),
            project_payments=project_payments,
            general_payments=cls.general_payments(member, payments),
        )
