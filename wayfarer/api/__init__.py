# api/__init__.py
"""
API Endpoints Package

Contains all FastAPI routers for the service:
- search: Travel search proxy
- comments: Comment collection CRUD
- health: Liveness
"""

from .comments import router as comments_router
from .health import router as health_router
from .search import router as search_router

__all__ = [
    "comments_router",
    "health_router",
    "search_router",
]
