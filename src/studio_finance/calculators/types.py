"""Type definitions for the reconciliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from studio_finance.calculators.amounts import ZERO, parse_amount, round_to_cents


class PaymentType(str, Enum):
    """Salary policy for a team member."""

    PER_MONTH = "per-month"
    PER_EVENT = "per-event"

    @classmethod
    def parse(cls, value: Any) -> PaymentType | None:
        """Return the matching policy, or None for unset/unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return "Per Month" if self is PaymentType.PER_MONTH else "Per Event"


def payment_type_label(value: Any) -> str:
    """Display label for a raw payment type value."""
    policy = PaymentType.parse(value)
    return policy.label if policy else "Not set"


DateLike = date | datetime | str | None


@dataclass(frozen=True)
class MemberPolicy:
    """A team member's identity and payment policy."""

    member_id: str
    payment_type: PaymentType | str | None = None
    salary: Decimal | str | int | float | None = None  # Per-unit rate
    display_name: str | None = None

    @property
    def policy(self) -> PaymentType | None:
        return PaymentType.parse(self.payment_type)

    @property
    def rate(self) -> Decimal:
        """Parsed salary in cents; negative or unreadable values count as zero."""
        amount = parse_amount(self.salary)
        return round_to_cents(amount) if amount > 0 else ZERO

    @property
    def has_policy(self) -> bool:
        """Whether both a payment type and a salary are set."""
        return self.policy is not None and self.rate > 0


@dataclass(frozen=True)
class EventAssignment:
    """A client event and the team members assigned to it."""

    event_id: str
    project_id: str | None
    event_date: DateLike = None
    assigned_member_ids: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.assigned_member_ids, frozenset):
            object.__setattr__(
                self, "assigned_member_ids", frozenset(self.assigned_member_ids or ())
            )

    def is_assigned(self, member_id: str | None) -> bool:
        return member_id is not None and member_id in self.assigned_member_ids


@dataclass(frozen=True)
class PaymentRecord:
    """An expense/transaction recorded against a member and/or project.

    Empty identifiers are normalized to None, so a record with
    ``project_id=""`` is a general (non-project) payment.
    """

    amount: Decimal | str | int | float | None = ZERO
    member_id: str | None = None
    project_id: str | None = None
    payment_date: DateLike = None
    payment_id: str | None = None
    comment: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "member_id", self.member_id or None)
        object.__setattr__(self, "project_id", self.project_id or None)

    @property
    def value(self) -> Decimal:
        return parse_amount(self.amount)


@dataclass
class ProjectPayableBreakdown:
    """Payable/paid/pending for one member on one project."""

    project_id: str | None
    event_count: int = 0
    unique_month_count: int = 0
    payable: Decimal = ZERO
    paid: Decimal = ZERO
    pending: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        """Signed payable minus paid; negative when overpaid."""
        return self.payable - self.paid

    @property
    def is_overpaid(self) -> bool:
        return self.balance < 0


@dataclass
class PayableSummary:
    """Aggregate payable/paid/pending for one member across projects."""

    member_id: str
    payable: Decimal = ZERO
    paid: Decimal = ZERO
    pending: Decimal = ZERO
    project_count: int = 0

    @property
    def balance(self) -> Decimal:
        return self.payable - self.paid

    @property
    def is_overpaid(self) -> bool:
        return self.balance < 0


@dataclass
class MemberFinanceStatement:
    """Everything the finance-detail view shows for one member."""

    member: MemberPolicy
    summary: PayableSummary
    breakdowns: list[ProjectPayableBreakdown] = field(default_factory=list)
    project_payments: dict[str | None, list[PaymentRecord]] = field(default_factory=dict)
    general_payments: list[PaymentRecord] = field(default_factory=list)

    @property
    def payment_type_label(self) -> str:
        return payment_type_label(self.member.payment_type)


def as_assignments(records: Iterable[EventAssignment] | None) -> list[EventAssignment]:
    return list(records or ())


def as_payments(records: Iterable[PaymentRecord] | None) -> list[PaymentRecord]:
    return list(records or ())
