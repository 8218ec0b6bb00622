"""API v1 endpoint routers."""

from .comments import router as comments_router
from .posts import router as posts_router

__all__ = ["comments_router", "posts_router"]
