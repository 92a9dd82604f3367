from techtalk.utils.helpers import (
    escape_like,
    get_summary,
    host,
    today_str,
    total_pages,
    utc_now,
)

__all__ = [
    "escape_like",
    "get_summary",
    "host",
    "today_str",
    "total_pages",
    "utc_now",
]
