"""
Request metrics and system monitoring.

This module provides thread-safe metrics collection for the API: request
totals, success/failure split, a rolling average response time, error
counts by type and per-operation timings.

Each application owns one ``MetricsManager`` (``app.state.metrics``). The
logging middleware, exception handlers and ``@timed`` operations record into
that instance; nothing is kept in module globals.
"""

from asyncio import to_thread
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from os import getpid
from platform import platform, python_version
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from psutil import Process, disk_usage, virtual_memory
from psutil import cpu_percent as get_cpu_percent

from techtalk.monitoring import get_logger
from techtalk.utils.helpers import utc_now

logger = get_logger(__name__)

_BYTES_PER_MB: int = 1024 * 1024
_MAX_RESPONSE_TIMES: int = 100
_CPU_SAMPLE_INTERVAL: float = 0.1


@dataclass(slots=True)
class ResponseTimeStats:
    """
    Rolling window of response times with O(1) average.

    Uses a bounded deque; the running sum is adjusted as old values fall out.
    """

    times: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_RESPONSE_TIMES))
    _sum: float = field(default=0.0, repr=False)

    def add(self, duration: float) -> None:
        """Add a response time, maintaining running sum for O(1) average."""
        if len(self.times) == self.times.maxlen:
            self._sum -= self.times[0]
        self.times.append(duration)
        self._sum += duration

    @property
    def average(self) -> float:
        return self._sum / len(self.times) if self.times else 0.0

    @property
    def count(self) -> int:
        return len(self.times)

    def clear(self) -> None:
        self.times.clear()
        self._sum = 0.0


class MetricsManager:
    """
    Thread-safe metrics collector for API performance tracking.

    All counter operations are protected by a lock.
    """

    __slots__ = (
        "_lock",
        "_total_requests",
        "_successful_requests",
        "_failed_requests",
        "_response_times",
        "_operation_times",
        "_error_counts",
        "_rate_limit_hits",
        "_last_reset",
    )

    def __init__(self) -> None:
        self._lock = Lock()
        self._total_requests: int = 0
        self._successful_requests: int = 0
        self._failed_requests: int = 0
        self._response_times = ResponseTimeStats()
        self._operation_times: dict[str, ResponseTimeStats] = defaultdict(ResponseTimeStats)
        self._error_counts: dict[str, int] = defaultdict(int)
        self._rate_limit_hits: int = 0
        self._last_reset: datetime = utc_now()

    def record_request(self, status_code: int, duration: float) -> None:
        """
        Record a finished HTTP request.

        Args:
            status_code: Response status code; 2xx and 3xx count as successful.
            duration: Response time in seconds.
        """
        with self._lock:
            self._total_requests += 1
            self._response_times.add(duration)
            if 200 <= status_code < 400:
                self._successful_requests += 1
            else:
                self._failed_requests += 1

    def record_error(self, error_type: str) -> None:
        """Count one occurrence of an error type (exception class name)."""
        with self._lock:
            self._error_counts[error_type] += 1

    def record_operation_time(self, operation: str, duration: float) -> None:
        """Record the duration of a named service operation."""
        with self._lock:
            self._operation_times[operation].add(duration)

    def record_rate_limit_hit(self) -> None:
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> dict[str, Any]:
        """
        Get current metrics summary (thread-safe snapshot).

        Returns:
            Dictionary containing all metrics with computed rates.
        """
        with self._lock:
            total = self._total_requests
            success_rate = self._successful_requests / total * 100 if total else 0.0
            error_rate = self._failed_requests / total * 100 if total else 0.0

            return {
                "totalRequests": total,
                "successfulRequests": self._successful_requests,
                "failedRequests": self._failed_requests,
                "successRate": round(success_rate, 2),
                "errorRate": round(error_rate, 2),
                "averageResponseTimeMs": round(self._response_times.average * 1000, 2),
                "errorCounts": dict(self._error_counts),
                "operationAverageMs": {
                    name: round(stats.average * 1000, 2)
                    for name, stats in self._operation_times.items()
                    if stats.count > 0
                },
                "rateLimitHits": self._rate_limit_hits,
                "lastReset": self._last_reset.isoformat(),
            }

    def reset(self) -> None:
        """Reset all metrics (thread-safe)."""
        with self._lock:
            self._total_requests = 0
            self._successful_requests = 0
            self._failed_requests = 0
            self._response_times.clear()
            self._operation_times.clear()
            self._error_counts.clear()
            self._rate_limit_hits = 0
            self._last_reset = utc_now()
        logger.info("Metrics reset")


class RequestTimer:
    """
    Context manager timing one operation into a metrics manager.

    Failed operations are timed too; their error types are counted by the
    exception handlers.
    """

    __slots__ = ("_operation", "_start_time", "_metrics")

    def __init__(self, operation: str, metrics: MetricsManager) -> None:
        self._operation = operation
        self._start_time: float = 0.0
        self._metrics = metrics

    def __enter__(self) -> Self:
        self._start_time = perf_counter()
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self._metrics.record_operation_time(self._operation, perf_counter() - self._start_time)

    async def __aenter__(self) -> Self:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)

    @property
    def elapsed(self) -> float:
        return perf_counter() - self._start_time if self._start_time else 0.0


@dataclass(slots=True, frozen=True)
class SystemMetrics:
    """Immutable system metrics snapshot."""

    cpu_percent: float
    memory_percent: float
    memory_used_mb: float
    memory_total_mb: float
    process_rss_mb: float
    disk_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpuPercent": self.cpu_percent,
            "memory": {
                "percent": self.memory_percent,
                "usedMb": self.memory_used_mb,
                "totalMb": self.memory_total_mb,
                "processRssMb": self.process_rss_mb,
            },
            "diskPercent": self.disk_percent,
            "platform": platform(),
            "pythonVersion": python_version(),
            "pid": getpid(),
        }


async def get_system_metrics() -> dict[str, Any]:
    """
    Get system-level metrics asynchronously.

    Runs blocking psutil calls in a thread to avoid blocking the event loop.
    """

    def _collect_metrics() -> SystemMetrics:
        memory = virtual_memory()
        disk = disk_usage("/")
        return SystemMetrics(
            cpu_percent=get_cpu_percent(interval=_CPU_SAMPLE_INTERVAL),
            memory_percent=memory.percent,
            memory_used_mb=round(memory.used / _BYTES_PER_MB, 2),
            memory_total_mb=round(memory.total / _BYTES_PER_MB, 2),
            process_rss_mb=round(Process().memory_info().rss / _BYTES_PER_MB, 2),
            disk_percent=disk.percent,
        )

    try:
        system_metrics = await to_thread(_collect_metrics)
        return system_metrics.to_dict()
    except OSError as e:
        logger.exception("Failed to get system metrics: OS error")
        return {"error": f"Failed to collect system metrics: {e}"}
