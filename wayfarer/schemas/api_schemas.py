# schemas/api_schemas.py
"""
Pydantic v2 schemas for the Wayfarer API
Covers the search proxy, the comment store and service health
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ============================================
# Enums
# ============================================

class Budget(str, Enum):
    AFFORDABLE = "affordable"
    MODERATE = "moderate"
    LUXURY = "luxury"


# ============================================
# Search proxy
# ============================================

class SearchRequest(BaseModel):
    """Free-text travel search forwarded to the text-generation provider"""
    query: str = Field(..., min_length=1, max_length=500, description="What the traveller is looking for")
    budget: Budget = Field(Budget.AFFORDABLE, description="Budget hint")
    max_results: int = Field(6, ge=1, le=20, description="Upper bound on returned options")

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query must not be blank")
        return value


class TravelOption(BaseModel):
    """
    Normalized shape of one suggested trip.

    Provider output is not forced into this model; it documents the keys the
    prompt asks for and callers should tolerate any of them being absent.
    """
    title: str
    country: Optional[str] = None
    price_estimate: Optional[float] = None
    duration: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)
    booking_url: Optional[str] = None
    info_url: Optional[str] = None
    description: Optional[str] = None


class SearchResponse(BaseModel):
    results: List[Any] = Field(default_factory=list)


# ============================================
# Comments
# ============================================

class CommentCreate(BaseModel):
    """Incoming comment; the body text may arrive as text, comment or message"""
    name: Optional[str] = None
    text: Optional[str] = Field(None, validation_alias=AliasChoices("text", "comment", "message"))


class Comment(BaseModel):
    """Stored comment record"""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    text: str
    created_at: str


class InitResponse(BaseModel):
    created: bool
    reason: str


# ============================================
# Service
# ============================================

class HealthResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
    field: Optional[str] = None
    detail: Optional[str] = None
