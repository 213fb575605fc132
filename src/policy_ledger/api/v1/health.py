"""Liveness endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...core.config import Settings
from ...gateway import LedgerGateway
from ..dependencies import get_app_settings, get_gateway

router = APIRouter()


class HealthStatus(BaseModel):
    """Health check response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Overall status")
    environment: str = Field(..., description="Deployment environment")
    ledger_backend: str = Field(..., description="Ledger substrate in use")


@router.get("/health")
async def health_check(
    gateway: LedgerGateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
) -> HealthStatus:
    """Report that the API is up and which ledger it talks to."""
    return HealthStatus(
        status="healthy",
        environment=settings.api_env,
        ledger_backend=type(gateway.ledger).__name__,
    )
