from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from starlette.requests import Request

from techtalk.managers.metrics import MetricsManager, RequestTimer

P = ParamSpec("P")
R = TypeVar("R")


def _resolve_metrics(kwargs: dict[str, object]) -> MetricsManager | None:
    """Find the app-owned metrics manager through the handler's ``request`` argument."""
    request = kwargs.get("request")
    if isinstance(request, Request):
        return getattr(request.app.state, "metrics", None)
    return None


def timed(
    endpoint: str | None = None,
    metrics: MetricsManager | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Time async route handlers with automatic metrics recording.

    The timing goes into ``metrics`` when given, otherwise into the manager
    of the application serving the request. Handlers must take ``request``
    as a keyword for the lookup to work (FastAPI always passes it that way).

    Args:
        endpoint: Operation name (defaults to function name).
        metrics: Explicit metrics manager.

    Example:
        @timed("/api/posts")
        async def list_posts(request: Request, ...) -> PostListResponse:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        ep = endpoint or func.__name__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            manager = metrics or _resolve_metrics(kwargs)
            if manager is None:
                return await func(*args, **kwargs)
            async with RequestTimer(ep, manager):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
