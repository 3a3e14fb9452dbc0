"""API routes."""

from studio_finance.api.routes.health import router as health_router
from studio_finance.api.routes.team_finance import router as team_finance_router

__all__ = ["health_router", "team_finance_router"]
