"""Team member model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_finance.calculators.types import MemberPolicy
from studio_finance.models.base import Base, TimestampMixin


class TeamMember(Base, TimestampMixin):
    """Studio team member (photographer, editor, assistant...)."""

    __tablename__ = "team_member"

    member_id: Mapped[str] = mapped_column(String, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    payment_type: Mapped[str | None] = mapped_column(String, nullable=True)
    # Kept as text, as entered in the back-office form
    salary: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "payment_type IS NULL OR payment_type IN ('per-month', 'per-event')",
            name="team_member_payment_type_check",
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_policy(self) -> MemberPolicy:
        """Engine input for this member."""
        return MemberPolicy(
            member_id=self.member_id,
            payment_type=self.payment_type,
            salary=self.salary,
            display_name=self.full_name,
        )
