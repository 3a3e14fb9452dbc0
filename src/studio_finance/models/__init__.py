"""ORM models."""

from studio_finance.models.base import Base, TimestampMixin
from studio_finance.models.events import ClientEvent, ClientEventMember
from studio_finance.models.expenses import EXPENSE_CATEGORIES, Expense
from studio_finance.models.team import TeamMember

__all__ = [
    "Base",
    "TimestampMixin",
    "ClientEvent",
    "ClientEventMember",
    "EXPENSE_CATEGORIES",
    "Expense",
    "TeamMember",
]
