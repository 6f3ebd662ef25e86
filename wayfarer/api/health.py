# api/health.py
"""Liveness endpoint"""

from fastapi import APIRouter

from ..schemas.api_schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    """Returns ok while the process is serving"""
    return HealthResponse(ok=True)
