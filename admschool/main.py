"""
FastAPI Application - AdmSchool API
Authentication service for the school administration application
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from admschool.api.v1 import router as api_v1_router
from admschool.config import Settings, get_settings
from admschool.core.database import build_engine, build_sessionmaker
from admschool.core.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (defaults to the cached environment settings)
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings)
    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for startup and shutdown events"""
        logger.info(
            "app_starting",
            environment=settings.ENVIRONMENT,
            database=settings.DATABASE_URL.split("@")[-1],
        )
        yield
        await engine.dispose()
        logger.info("app_stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Token authentication for the AdmSchool administration app",
        version=settings.VERSION,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Read by the get_app_settings and get_db dependencies
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Tag every log line of a request with its request ID."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        set_request_context(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint - API information"""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "running",
            "docs": "/docs",
        }

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    return app


app = create_app()
