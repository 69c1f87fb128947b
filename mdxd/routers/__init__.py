"""API routers for mdxd daemon."""

from .build import router as build_router
from .cache import router as cache_router
from .status import router as status_router

__all__ = [
    "build_router",
    "cache_router",
    "status_router",
]
