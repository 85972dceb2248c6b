"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import EVENT_NAME, LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT
from ...scoring.ranking import SORT_FIELDS

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose frontend configuration values."""

    return {
        "event_name": EVENT_NAME,
        "leaderboard": {
            "default_limit": LEADERBOARD_DEFAULT_LIMIT,
            "max_limit": LEADERBOARD_MAX_LIMIT,
            "sort_fields": list(SORT_FIELDS),
        },
    }


__all__ = ["router"]
