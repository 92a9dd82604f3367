from techtalk.managers.metrics import (
    MetricsManager,
    RequestTimer,
    ResponseTimeStats,
    get_system_metrics,
)
from techtalk.managers.rate_limiter import limiter, rate_limit_exceeded_handler

__all__ = [
    "MetricsManager",
    "RequestTimer",
    "ResponseTimeStats",
    "get_system_metrics",
    "limiter",
    "rate_limit_exceeded_handler",
]
