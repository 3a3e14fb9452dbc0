"""Client event and team assignment models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studio_finance.calculators.types import EventAssignment
from studio_finance.models.base import Base, TimestampMixin


class ClientEvent(Base, TimestampMixin):
    """A shoot (wedding, reception, pre-wedding...) within a project."""

    __tablename__ = "client_event"

    client_event_id: Mapped[str] = mapped_column(String, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    event_name: Mapped[str | None] = mapped_column(String, nullable=True)
    # Studio wall-clock time; the calendar month is read from it as is
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    # Relationships
    assignments: Mapped[list[ClientEventMember]] = relationship(
        back_populates="client_event",
        cascade="all, delete-orphan",
    )

    @property
    def assigned_member_ids(self) -> frozenset[str]:
        return frozenset(a.member_id for a in self.assignments)

    def to_assignment(self) -> EventAssignment:
        """Engine input for this event."""
        return EventAssignment(
            event_id=self.client_event_id,
            project_id=self.project_id,
            event_date=self.event_date,
            assigned_member_ids=self.assigned_member_ids,
        )


class ClientEventMember(Base):
    """Team member assigned to a client event."""

    __tablename__ = "client_event_member"

    client_event_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("client_event.client_event_id", ondelete="CASCADE"),
        primary_key=True,
    )
    member_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("team_member.member_id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Relationships
    client_event: Mapped[ClientEvent] = relationship(back_populates="assignments")
