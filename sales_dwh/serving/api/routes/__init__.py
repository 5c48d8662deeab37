"""
API Routes Module
"""
from .health import router as health_router
from .analytics import router as analytics_router
from .explore import router as explore_router

__all__ = [
    "health_router",
    "analytics_router",
    "explore_router",
]
