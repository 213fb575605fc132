"""FastAPI dependencies shared by the v1 routers."""

from beartype import beartype
from fastapi import HTTPException, Request, status

from ..core.config import Settings, get_settings
from ..gateway import LedgerGateway


@beartype
def get_gateway(request: Request) -> LedgerGateway:
    """Provide the gateway created during application startup.

    Raises:
        HTTPException: If the application has not finished starting.
    """
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ledger gateway not initialized",
        )
    return gateway


@beartype
def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with, or the environment ones."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()
