from typing import Any

from pydantic import BaseModel


class DatabaseStatus(BaseModel):
    status: str
    connected: bool


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    environment: str
    version: str
    database: DatabaseStatus


class EntityCounts(BaseModel):
    posts: int
    users: int
    categories: int
    recent_posts_24h: int
    recent_users_24h: int


class MetricsResponse(BaseModel):
    timestamp: str
    application: dict[str, Any]
    database: EntityCounts
    requests: dict[str, Any]
    system: dict[str, Any]
