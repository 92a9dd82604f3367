"""
System routes: welcome message, health check and request metrics.

``router`` is mounted at the application root; ``metrics_router`` lives
under the API prefix.
"""

from datetime import timedelta
from time import monotonic

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from techtalk.auth import AdminUserDep
from techtalk.configs import settings
from techtalk.db import ping
from techtalk.dependencies import CategoryRepoDep, MetricsDep, PostRepoDep, UserRepoDep
from techtalk.managers import get_system_metrics, limiter
from techtalk.monitoring import get_logger
from techtalk.schemas.system import DatabaseStatus, EntityCounts, HealthResponse, MetricsResponse
from techtalk.utils.helpers import utc_now

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter(prefix="/metrics", tags=["📈 Metrics"])


def _uptime(request: Request) -> float:
    started_at = getattr(request.app.state, "started_at", None)
    return round(monotonic() - started_at, 2) if started_at is not None else 0.0


async def _check_database() -> DatabaseStatus:
    connected = await ping()
    return DatabaseStatus(status="connected" if connected else "disconnected", connected=connected)


@router.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "TechTalkZA Blog API is running"}},
            },
        },
    },
    operation_id="root_access",
)
@limiter.exempt
async def root(request: Request) -> dict[str, str]:
    return {"message": "TechTalkZA Blog API is running"}


@router.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "OK",
                        "timestamp": "2025-01-01T00:00:00+00:00",
                        "uptime": 12.5,
                        "environment": "development",
                        "version": "1.0.0",
                        "database": {"status": "connected", "connected": True},
                    },
                },
            },
        },
        503: {"description": "Database unreachable"},
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Used to switch the status code to 503 when the database is down.

    Returns
    -------
    HealthResponse
        Service status, uptime and database connectivity.
    """
    database = await _check_database()
    response.status_code = HTTP_200_OK if database.connected else HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="OK" if database.connected else "ERROR",
        timestamp=utc_now().isoformat(),
        uptime=_uptime(request),
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
        database=database,
    )


@metrics_router.get(
    "",
    response_class=ORJSONResponse,
    response_model=MetricsResponse,
    summary="Get metrics",
    description="Application info, entity counts, request metrics and system metrics.",
    responses={
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("30/minute")
async def get_metrics(
    request: Request,
    response: Response,
    metrics: MetricsDep,
    post_repo: PostRepoDep,
    user_repo: UserRepoDep,
    category_repo: CategoryRepoDep,
) -> MetricsResponse:
    """
    Get API performance metrics.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.

    Returns
    -------
    MetricsResponse
        Snapshot of application, database, request and system metrics.

    Notes
    -----
    Rate limited to 30 requests per minute.
    """
    since = utc_now() - timedelta(hours=24)
    counts = EntityCounts(
        posts=await post_repo.count(),
        users=await user_repo.count(),
        categories=await category_repo.count(),
        recent_posts_24h=await post_repo.count_since(since),
        recent_users_24h=await user_repo.count_since(since),
    )
    return MetricsResponse(
        timestamp=utc_now().isoformat(),
        application={
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "uptime": _uptime(request),
        },
        database=counts,
        requests=metrics.get_metrics(),
        system=await get_system_metrics(),
    )


@metrics_router.post(
    "/reset",
    response_class=ORJSONResponse,
    summary="Reset request metrics",
    description="Admin only. Zero the request counters and timings.",
    responses={403: {"description": "Admin access required"}},
    operation_id="reset_metrics",
)
async def reset_metrics(
    request: Request,
    admin: AdminUserDep,
    metrics: MetricsDep,
) -> dict[str, object]:
    metrics.reset()
    logger.info(f"Metrics reset by admin {admin.id}")
    return {"message": "Metrics reset successfully", "requests": metrics.get_metrics()}
