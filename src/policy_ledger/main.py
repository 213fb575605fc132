"""Policy Ledger - Main Application Module."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from beartype import beartype
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from .api.v1 import legacy_router
from .api.v1 import router as v1_router
from .core.config import Settings, get_settings
from .core.logging_utils import configure_logging, get_logger, level_from_name
from .gateway import LedgerGateway
from .ledger import Ledger, create_ledger

logger = get_logger(__name__)


class APIInfo(BaseModel):
    """Root endpoint payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    version: str
    status: str
    environment: str


@beartype
def create_app(settings: Settings | None = None, ledger: Ledger | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment ones
        ledger: Substrate to use instead of the one settings select

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    configure_logging(level=level_from_name(settings.log_level))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifecycle - startup and shutdown."""
        gateway = LedgerGateway(ledger or create_ledger(settings))
        logger.info(
            "Starting %s in %s mode (ledger: %s)",
            settings.app_name,
            settings.api_env,
            settings.ledger_backend,
        )
        await gateway.connect()
        app.state.gateway = gateway
        app.state.settings = settings

        yield

        logger.info("Shutting down %s", settings.app_name)
        await gateway.disconnect()
        app.state.gateway = None

    app = FastAPI(
        title=settings.app_name,
        description="Insurance policies and claims on an append-only ledger",
        version="1.0.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    # Include API routers
    app.include_router(v1_router)
    app.include_router(legacy_router, tags=["policies"])

    @app.get("/")
    async def root() -> APIInfo:
        """Root endpoint returning API information."""
        return APIInfo(
            name=settings.app_name,
            version="1.0.0",
            status="operational",
            environment=settings.api_env,
        )

    return app


@beartype
def main() -> None:
    """Run the main application entry point."""
    settings = get_settings()

    uvicorn.run(
        "policy_ledger.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
