"""Team finance reconciliation endpoints (read-only)."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from studio_finance.api.dependencies import FinanceService, TenantId
from studio_finance.api.schemas import (
    ErrorResponse,
    MemberProjectPayableResponse,
    MemberStatementResponse,
    PayableSummaryResponse,
    ProjectBreakdownResponse,
    ProjectPayablesResponse,
)
from studio_finance.services.snapshot_service import MemberNotFoundError

router = APIRouter(prefix="/team-finance", tags=["team-finance"])


def _not_found(exc: MemberNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ============================================================================
# Member views
# ============================================================================


@router.get(
    "/members/{member_id}/pending",
    response_model=PayableSummaryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_member_pending(
    service: FinanceService,
    tenant_id: TenantId,
    member_id: Annotated[str, Path()],
) -> PayableSummaryResponse:
    """Aggregate payable, paid and pending amounts for a member."""
    try:
        summary = await service.pending_payable(tenant_id, member_id)
    except MemberNotFoundError as e:
        raise _not_found(e)
    return PayableSummaryResponse.model_validate(summary)


@router.get(
    "/members/{member_id}/projects/{project_id}/pending",
    response_model=ProjectBreakdownResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_member_project_pending(
    service: FinanceService,
    tenant_id: TenantId,
    member_id: Annotated[str, Path()],
    project_id: Annotated[str, Path()],
) -> ProjectBreakdownResponse:
    """Pending amount for a member on one project (payment-entry hint)."""
    try:
        breakdown = await service.project_pending_hint(tenant_id, member_id, project_id)
    except MemberNotFoundError as e:
        raise _not_found(e)
    return ProjectBreakdownResponse.model_validate(breakdown)


@router.get(
    "/members/{member_id}/statement",
    response_model=MemberStatementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_member_statement(
    service: FinanceService,
    tenant_id: TenantId,
    member_id: Annotated[str, Path()],
) -> MemberStatementResponse:
    """Per-project breakdown (highest pending first) and payment history."""
    try:
        statement = await service.member_statement(tenant_id, member_id)
    except MemberNotFoundError as e:
        raise _not_found(e)
    return MemberStatementResponse.from_statement(statement)


# ============================================================================
# Project views
# ============================================================================


@router.get(
    "/projects/{project_id}/payables",
    response_model=ProjectPayablesResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_project_payables(
    service: FinanceService,
    tenant_id: TenantId,
    project_id: Annotated[str, Path()],
) -> ProjectPayablesResponse:
    """Payables for every member assigned to the project."""
    payables = await service.project_team_payables(tenant_id, project_id)
    items = [MemberProjectPayableResponse.from_payable(p) for p in payables]
    return ProjectPayablesResponse(
        project_id=project_id,
        items=items,
        total_payable=sum((i.payable for i in items), Decimal("0")),
        total_paid=sum((i.paid for i in items), Decimal("0")),
        total_pending=sum((i.pending for i in items), Decimal("0")),
    )
