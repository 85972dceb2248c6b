"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT
from ...core.database import get_session
from ...scoring.ranking import LeaderboardQuery
from ...services.leaderboard import leaderboard_page
from ...services.serializers import page_to_dict

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard(
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    name_filter: Optional[str] = None,
    org_filter: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Ranked leaderboard with filtering, display sorting and pagination."""

    query = LeaderboardQuery.from_params(
        limit=limit,
        offset=offset,
        sort=sort,
        order=order,
        name_filter=name_filter,
        org_filter=org_filter,
        default_limit=LEADERBOARD_DEFAULT_LIMIT,
        max_limit=LEADERBOARD_MAX_LIMIT,
    )
    page, stats = leaderboard_page(session, query)
    return page_to_dict(page, stats)


__all__ = ["router"]
