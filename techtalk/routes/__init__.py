from techtalk.routes.auth import router as auth_router
from techtalk.routes.categories import router as categories_router
from techtalk.routes.comments import router as comments_router
from techtalk.routes.posts import router as posts_router
from techtalk.routes.system import metrics_router
from techtalk.routes.system import router as system_router

__all__ = [
    "auth_router",
    "categories_router",
    "comments_router",
    "metrics_router",
    "posts_router",
    "system_router",
]
