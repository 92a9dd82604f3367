"""
Middleware components for the TechTalk API.

This module contains the request logging middleware (which also feeds the
metrics manager), security headers, CORS configuration and the lifespan
handler that prepares logging, the uploads directory and the database.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from techtalk.configs import settings
from techtalk.db import close_db, init_db
from techtalk.managers.metrics import MetricsManager
from techtalk.monitoring import bind_request_context, clear_context, configure_logging, get_logger
from techtalk.utils.helpers import get_summary, host

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown."""
    configure_logging()
    logger.info(f"Starting {app.title} v{app.version} ({settings.ENVIRONMENT})...")

    try:
        settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
        await init_db()
        logger.info("Services initialized successfully")
        logger.info("  - API Documentation: /docs")
        logger.info("  - Health Check: /health")
        logger.info(f"  - Metrics: {settings.API_PREFIX}/metrics")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await close_db()
    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware: the frontend URL in production, dev servers otherwise."""
    allowed_origins: list[str] = []
    if not settings.is_production:
        allowed_origins.extend(settings.CORS_DEV_ORIGINS)
    elif frontend_url := settings.FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request with timing and record it into the metrics manager.

    The request id comes from ``X-Request-ID`` when the client sends one and
    is echoed back in the response.
    """

    def __init__(self, app: ASGIApp, metrics: MetricsManager) -> None:
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        bind_request_context(request_id=request_id, client_ip=host(request))

        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        try:
            response = await call_next(request)
        except Exception:
            self.metrics.record_request(HTTP_500_INTERNAL_SERVER_ERROR, perf_counter() - start_time)
            clear_context()
            raise

        duration = perf_counter() - start_time
        self.metrics.record_request(response.status_code, duration)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {duration * 1000:.2f}ms",
        )
        clear_context()
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
