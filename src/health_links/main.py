"""Main FastAPI application for Health Links."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .api.routes import router as api_router
from .config import Settings, get_settings
from .generation import AnswerGenerator, create_generator
from .middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware
from .observability.logging import configure_logging
from .orchestration import Orchestrator
from .quota import QuotaStore, create_quota_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings: Settings = app.state.settings

    configure_logging(
        environment=settings.environment,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )

    if app.state.quota_store is None:
        app.state.quota_store = create_quota_store(settings)
    if app.state.generator is None:
        app.state.generator = create_generator(settings)
    app.state.orchestrator = Orchestrator(app.state.quota_store, app.state.generator)

    logger.info("%s v%s started", settings.app_name, settings.app_version)
    logger.info("Environment: %s (tier=%s)", settings.environment, settings.deployment_tier)
    logger.info(
        "Quota: cap=%d/day, store %s",
        settings.global_daily_cap,
        "configured" if app.state.quota_store.configured else "not configured",
    )

    yield

    # Shutdown
    logger.info("Shutting down %s...", settings.app_name)

    await app.state.generator.aclose()
    await app.state.quota_store.aclose()
    logger.info("Quota store and generator clients closed")


def create_app(
    settings: Optional[Settings] = None,
    quota_store: Optional[QuotaStore] = None,
    generator: Optional[AnswerGenerator] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    ``quota_store`` and ``generator`` default to the configured
    implementations, created at startup.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Health information links with a global daily generation quota",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.quota_store = quota_store
    app.state.generator = generator
    app.state.orchestrator = (
        Orchestrator(quota_store, generator) if quota_store and generator else None
    )

    # CORS middleware, configurable origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestContextMiddleware)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Legacy health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/health/live")
    async def health_live():
        """Liveness probe: process is running."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness probe: quota store configured where it is required."""
        store = request.app.state.quota_store
        configured = bool(store and store.configured)
        checks = {
            "quota_store": "configured" if configured else "not configured",
            "deployment_tier": settings.deployment_tier,
        }
        if not configured and settings.deployment_tier == "prod":
            return JSONResponse(status_code=503, content={"status": "not_ready", "checks": checks})
        return {"status": "ready", "checks": checks}

    if settings.enable_metrics:
        @app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from .observability.metrics import generate_metrics_text
            return PlainTextResponse(
                generate_metrics_text(), media_type="text/plain; version=0.0.4; charset=utf-8"
            )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "health_links.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
