"""Leaderboard assembly from stored participants and station results."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from sqlmodel import Session, select

from ..models import Participant, StationResult
from ..scoring.aggregate import aggregate_scores
from ..scoring.ranking import (
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardQuery,
    filter_entries,
    query_leaderboard,
    rank_entries,
)
from ..scoring.statistics import LeaderboardStats, compute_stats

logger = logging.getLogger(__name__)


def load_entries(session: Session) -> List[LeaderboardEntry]:
    """Build one unranked entry per participant from the stored scores."""

    participants = session.exec(select(Participant).order_by(Participant.id)).all()
    results = session.exec(select(StationResult)).all()

    by_participant: Dict[int, List[StationResult]] = defaultdict(list)
    for result in results:
        by_participant[result.participant_id].append(result)

    entries: List[LeaderboardEntry] = []
    for participant in participants:
        aggregate = aggregate_scores(
            (result.station_type, result.score, result.created_at)
            for result in by_participant.get(participant.id, [])
        )
        entries.append(
            LeaderboardEntry.from_aggregate(
                id=participant.id,
                participant_code=participant.participant_code,
                name=participant.name,
                organisation=participant.organisation,
                gender=participant.gender,
                aggregate=aggregate,
            )
        )
    return entries


def build_leaderboard(session: Session) -> List[LeaderboardEntry]:
    """Canonically ranked leaderboard over every participant with a score."""

    ranked = rank_entries(load_entries(session))
    logger.debug("Ranked %d participants", len(ranked))
    return ranked


def leaderboard_page(
    session: Session, query: Optional[LeaderboardQuery] = None
) -> Tuple[LeaderboardPage, LeaderboardStats]:
    """Serve one view of the leaderboard plus stats over the filtered set."""

    query = query or LeaderboardQuery()
    ranked = build_leaderboard(session)
    page = query_leaderboard(ranked, query)
    stats = compute_stats(filter_entries(ranked, query.name_filter, query.org_filter))
    return page, stats


__all__ = ["build_leaderboard", "leaderboard_page", "load_entries"]
