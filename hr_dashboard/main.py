"""HR Leave Dashboard — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hr_dashboard.admin.router import router as admin_router
from hr_dashboard.auth.router import router as auth_router
from hr_dashboard.common.exceptions import register_exception_handlers
from hr_dashboard.common.rate_limit import limiter
from hr_dashboard.config import settings
from hr_dashboard.files.router import router as files_router
from hr_dashboard.leave.router import router as leave_router

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root logging at ``settings.LOG_LEVEL``."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("HR Leave Dashboard starting (%s)", settings.ENVIRONMENT)
    yield
    logger.info("HR Leave Dashboard stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="HR Leave Dashboard",
        description="Leave requests, manager approvals, entitlements and blocked days",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api", tags=["auth"])
    app.include_router(leave_router, prefix="/api/leave", tags=["leave"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(files_router, prefix="/api/files", tags=["files"])

    return app


app = create_app()
