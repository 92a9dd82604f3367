"""TechTalkZA Blog API - REST backend for the TechTalkZA blog."""

from time import monotonic

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from techtalk.configs import settings
from techtalk.errors import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    PasswordHashingError,
    UploadError,
    ValidationError,
    auth_exception_handler,
    create_unexpected_exception_handler,
    database_exception_handler,
    password_hashing_exception_handler,
    request_validation_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from techtalk.managers import MetricsManager, limiter, rate_limit_exceeded_handler
from techtalk.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from techtalk.monitoring import get_logger
from techtalk.routes import (
    auth_router,
    categories_router,
    comments_router,
    metrics_router,
    posts_router,
    system_router,
)

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Build the application.

    Each call returns an independent app with its own metrics manager, so
    tests can create fresh instances.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="REST API for the TechTalkZA blog: posts, comments, categories and auth",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        swagger_ui_parameters={
            "docExpansion": "none",
            "operationsSorter": "method",
        },
    )

    metrics = MetricsManager()
    app.state.metrics = metrics
    app.state.limiter = limiter
    app.state.started_at = monotonic()

    configure_cors(app)

    app.add_middleware(LoggingMiddleware, metrics=metrics)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    api_routes = [
        auth_router,
        posts_router,
        comments_router,
        categories_router,
        metrics_router,
    ]
    _ = [app.include_router(router, prefix=settings.API_PREFIX) for router in api_routes]
    app.include_router(system_router)

    errors = [
        (RateLimitExceeded, rate_limit_exceeded_handler),
        (RequestValidationError, request_validation_exception_handler),
        (ValidationError, validation_exception_handler),
        (AuthenticationError, auth_exception_handler),
        (AuthorizationError, auth_exception_handler),
        (DatabaseError, database_exception_handler),
        (UploadError, upload_exception_handler),
        (PasswordHashingError, password_hashing_exception_handler),
        (Exception, create_unexpected_exception_handler(logger)),
    ]
    _ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

    return app


app = create_app()


if __name__ == "__main__":
    from uvicorn import run

    run(
        "techtalk.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info",
        reload=settings.ENVIRONMENT == "development",
    )
