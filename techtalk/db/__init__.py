from techtalk.db.database import (
    async_session_maker,
    close_db,
    engine,
    get_session,
    init_db,
    ping,
    transaction,
)

__all__ = [
    "async_session_maker",
    "close_db",
    "engine",
    "get_session",
    "init_db",
    "ping",
    "transaction",
]
