from techtalk.dependencies.dependencies import (
    AuthServiceDep,
    CategoryRepoDep,
    CategoryServiceDep,
    MetricsDep,
    PostListQuery,
    PostListQueryDep,
    PostRepoDep,
    PostServiceDep,
    SessionDep,
    UserDBDep,
    UserRepoDep,
    get_current_user,
    get_media_service,
    get_metrics_manager,
    oauth2_scheme,
)

__all__ = [
    "AuthServiceDep",
    "CategoryRepoDep",
    "CategoryServiceDep",
    "MetricsDep",
    "PostListQuery",
    "PostListQueryDep",
    "PostRepoDep",
    "PostServiceDep",
    "SessionDep",
    "UserDBDep",
    "UserRepoDep",
    "get_current_user",
    "get_media_service",
    "get_metrics_manager",
    "oauth2_scheme",
]
