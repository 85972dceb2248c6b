"""Station catalogue endpoint."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter

from ...services.serializers import stations_catalogue

router = APIRouter(tags=["stations"])


@router.get("/stations")
def list_stations() -> List[Dict[str, Any]]:
    """List the assessment stations in event order."""

    return stations_catalogue()


__all__ = ["router"]
