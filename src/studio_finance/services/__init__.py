"""Services for studio finance."""

from studio_finance.services.finance_service import (
    MemberProjectPayable,
    MemberSummary,
    TeamFinanceService,
)
from studio_finance.services.snapshot_service import (
    FinanceLookupError,
    FinanceSnapshot,
    FinanceSnapshotLoader,
    GroupSnapshot,
    MemberNotFoundError,
)

__all__ = [
    "FinanceLookupError",
    "FinanceSnapshot",
    "FinanceSnapshotLoader",
    "GroupSnapshot",
    "MemberNotFoundError",
    "MemberProjectPayable",
    "MemberSummary",
    "TeamFinanceService",
]
