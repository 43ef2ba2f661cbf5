"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from iconsplit.engine.registry import get_registry
from iconsplit.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        strategies_registered=get_registry().count,
    )


@router.get("/strategies")
async def strategies() -> list[dict[str, object]]:
    return [
        {
            "tag": spec.tag,
            "priority": spec.priority,
            "structural": spec.structural,
            "lastResort": spec.last_resort,
            "description": spec.description,
        }
        for spec in get_registry().all()
    ]
