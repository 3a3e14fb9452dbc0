"""Finance reconciliation engine."""

from studio_finance.calculators.reconciliation import FinanceReconciliationEngine
from studio_finance.calculators.types import (
    EventAssignment,
    MemberFinanceStatement,
    MemberPolicy,
    PayableSummary,
    PaymentRecord,
    PaymentType,
    ProjectPayableBreakdown,
)

__all__ = [
    "FinanceReconciliationEngine",
    "EventAssignment",
    "MemberFinanceStatement",
    "MemberPolicy",
    "PayableSummary",
    "PaymentRecord",
    "PaymentType",
    "ProjectPayableBreakdown",
]
