# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Search proxy requests/responses
- Comment records
- Service responses
"""

from .api_schemas import (
    # Enums
    Budget,
    # Search
    SearchRequest, SearchResponse, TravelOption,
    # Comments
    Comment, CommentCreate, InitResponse,
    # Service
    ErrorResponse, HealthResponse,
)

__all__ = [
    "Budget",
    "SearchRequest", "SearchResponse", "TravelOption",
    "Comment", "CommentCreate", "InitResponse",
    "ErrorResponse", "HealthResponse",
]
