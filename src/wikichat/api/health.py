"""Liveness probe."""

from fastapi import APIRouter

from .models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse()
