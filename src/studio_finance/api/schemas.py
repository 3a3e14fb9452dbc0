"""Pydantic schemas for API response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from studio_finance.calculators.types import (
    MemberFinanceStatement,
    PaymentRecord,
    payment_type_label,
)
from studio_finance.services.finance_service import MemberProjectPayable


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None


# ============================================================================
# Reconciliation schemas
# ============================================================================


class PayableSummaryResponse(BaseModel):
    """Aggregate payable/paid/pending for one member."""

    model_config = ConfigDict(from_attributes=True)

    member_id: str
    payable: Decimal
    paid: Decimal
    pending: Decimal
    balance: Decimal
    is_overpaid: bool
    project_count: int


class ProjectBreakdownResponse(BaseModel):
    """Payable/paid/pending for one member on one project."""

    model_config = ConfigDict(from_attributes=True)

    project_id: str | None
    event_count: int
    unique_month_count: int
    payable: Decimal
    paid: Decimal
    pending: Decimal
    balance: Decimal
    is_overpaid: bool


class PaymentResponse(BaseModel):
    """A payment made to a member."""

    model_config = ConfigDict(from_attributes=True)

    payment_id: str | None = None
    project_id: str | None = None
    amount: Decimal
    payment_date: datetime | date | str | None = None
    comment: str | None = None


class ProjectStatementEntry(ProjectBreakdownResponse):
    """A project breakdown with the payments made on it."""

    payments: list[PaymentResponse] = []


class MemberStatementResponse(BaseModel):
    """Finance-detail view for one member."""

    member_id: str
    display_name: str | None = None
    payment_type: str | None = None
    payment_type_label: str
    salary: Decimal
    summary: PayableSummaryResponse
    projects: list[ProjectStatementEntry]
    general_payments: list[PaymentResponse]

    @classmethod
    def from_statement(cls, statement: MemberFinanceStatement) -> "MemberStatementResponse":
        member = statement.member
        policy = member.policy
        return cls(
            member_id=member.member_id,
            display_name=member.display_name,
            payment_type=policy.value if policy else None,
            payment_type_label=statement.payment_type_label,
            salary=member.rate,
            summary=PayableSummaryResponse.model_validate(statement.summary),
            projects=[
                ProjectStatementEntry(
                    **ProjectBreakdownResponse.model_validate(b).model_dump(),
                    payments=[
                        _payment_response(p)
                        for p in statement.project_payments.get(b.project_id, [])
                    ],
                )
                for b in statement.breakdowns
            ],
            general_payments=[_payment_response(p) for p in statement.general_payments],
        )


class MemberProjectPayableResponse(ProjectBreakdownResponse):
    """A member's standing on a project."""

    member_id: str
    display_name: str | None = None
    payment_type_label: str

    @classmethod
    def from_payable(cls, payable: MemberProjectPayable) -> "MemberProjectPayableResponse":
        return cls(
            **ProjectBreakdownResponse.model_validate(payable.breakdown).model_dump(),
            member_id=payable.member.member_id,
            display_name=payable.member.display_name,
            payment_type_label=payment_type_label(payable.member.payment_type),
        )


class ProjectPayablesResponse(BaseModel):
    """Team payables for one project."""

    project_id: str
    items: list[MemberProjectPayableResponse]
    total_payable: Decimal
    total_paid: Decimal
    total_pending: Decimal


def _payment_response(payment: PaymentRecord) -> PaymentResponse:
    return PaymentResponse(
        payment_id=payment.payment_id,
        project_id=payment.project_id,
        amount=payment.value,
        payment_date=payment.payment_date,
        comment=payment.comment,
    )
