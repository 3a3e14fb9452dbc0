"""Expense model (payments to team members and general costs)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_finance.calculators.types import PaymentRecord
from studio_finance.models.base import Base, TimestampMixin

EXPENSE_CATEGORIES = ("salary", "equipment", "travel", "venue", "food", "printing", "other")


class Expense(Base, TimestampMixin):
    """A recorded expense.

    An expense with a member is a payment to that member; without a
    project it is a general payment not tied to any shoot.
    """

    __tablename__ = "expense"

    expense_id: Mapped[str] = mapped_column(String, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    project_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    member_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("team_member.member_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    comment: Mapped[str] = mapped_column(String, nullable=False, default="")
    date: Mapped[datetime] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="other")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="expense_amount_check"),
        CheckConstraint(
            "category IN (" + ", ".join(f"'{c}'" for c in EXPENSE_CATEGORIES) + ")",
            name="expense_category_check",
        ),
    )

    def to_payment(self) -> PaymentRecord:
        """Engine input for this expense."""
        return PaymentRecord(
            amount=self.amount,
            member_id=self.member_id,
            project_id=self.project_id,
            payment_date=self.date,
            payment_id=self.expense_id,
            comment=self.comment,
        )
