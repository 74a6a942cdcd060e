"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rollcall.core.config import get_settings
from rollcall.core.logging import configure_logging, get_logger
from rollcall.domain.exceptions import ApplicationError
from rollcall.infrastructure.api.middleware import (
    ContextMiddleware,
    RateLimitMiddleware,
    RateLimitStorage,
    SecurityHeadersMiddleware,
)
from rollcall.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

HTTP_ERROR_TAGS = {
    404: "NotFound",
    405: "MethodNotAllowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting Rollcall",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=settings.database_backend,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down Rollcall")
    await close_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()
    docs_enabled = not settings.is_production

    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description="Account-owned groups and the people in them",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.started_at = time.monotonic()
    # Injected counter store; tests clear it between runs
    app.state.rate_limit_storage = RateLimitStorage()

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Liveness check. Does not touch the database."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check, including database connectivity."""
        db = get_db_manager()
        if await db.check_connection():
            return {
                "status": "ready",
                "database": db.settings.database_backend,
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from rollcall.infrastructure.api.routes import (
        groups_router,
        people_router,
        users_router,
    )

    app.include_router(users_router, prefix="/users")
    app.include_router(groups_router, prefix="/groups")
    app.include_router(people_router, prefix="/people")


def internal_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={"_tag": "InternalServerError"})


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Every error leaves the API as a tagged body, ``{"_tag": ...}``.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request: Request, exc: ApplicationError):
        logger.info(
            "Request rejected",
            path=request.url.path,
            method=request.method,
            tag=exc.tag,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        issues = [
            {"path": list(error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.info(
            "Request validation failed",
            path=request.url.path,
            method=request.method,
            issue_count=len(issues),
        )
        return JSONResponse(
            status_code=400,
            content={"_tag": "ValidationError", "issues": issues},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        tag = HTTP_ERROR_TAGS.get(exc.status_code, "HttpError")
        return JSONResponse(
            status_code=exc.status_code,
            content={"_tag": tag},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return internal_error_response()


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Starlette runs the last registered middleware first, so the order below
    is innermost to outermost: rate limiting, request context, request
    logging, CORS, security headers.

    Args:
        app: FastAPI application instance.
    """
    settings = get_settings()

    app.add_middleware(RateLimitMiddleware, storage=app.state.rate_limit_storage)
    app.add_middleware(ContextMiddleware)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log each request and propagate the correlation ID."""
        from rollcall.core.logging import (
            bind_correlation_id,
            clear_context,
            new_correlation_id,
            redact_mapping,
        )

        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        request.state.correlation_id = correlation_id
        bind_correlation_id(correlation_id)

        started = time.perf_counter()
        logger.debug(
            "Request payload",
            method=request.method,
            path=request.url.path,
            query=str(request.url.query),
            headers=redact_mapping(dict(request.headers)),
        )

        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception(
                    "Unhandled exception",
                    method=request.method,
                    path=request.url.path,
                    exc_type=type(exc).__name__,
                )
                response = internal_error_response()

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )
    app.add_middleware(SecurityHeadersMiddleware)


# Create the application instance
app = create_app()
