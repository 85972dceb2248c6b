"""Canonical leaderboard ranking and view queries.

Ranking happens once over the whole scored population:

1. higher ``total_score`` first;
2. on equal totals, the participant who finished earlier wins;
3. participant code, then id, settle anything still tied.

Participants without a single completed station are left out. Ranks are
dense (1..N) and unique.

:func:`query_leaderboard` filters, sorts and paginates an already ranked list
for display. It only reorders entries; the ``rank`` attached by
:func:`rank_entries` is never recomputed, so a participant keeps the same rank
whatever view they appear in.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from .aggregate import Grade, StationAggregate
from .stations import StationType

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

SORT_FIELDS = (
    "rank",
    "total_score",
    "balance",
    "breath",
    "grip",
    "health",
    "completed_stations",
    "name",
    "organisation",
)
DEFAULT_SORT = "total_score"
ORDERS = ("asc", "desc")
DEFAULT_ORDER = "desc"

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class LeaderboardEntry:
    id: Any
    participant_code: str
    name: str
    organisation: Optional[str]
    gender: Optional[str]
    balance: Optional[int]
    breath: Optional[int]
    grip: Optional[int]
    health: Optional[int]
    total_score: Optional[int]
    completed_stations: int
    grade: Optional[Grade]
    latest_completion: Optional[datetime]
    rank: Optional[int] = None

    @classmethod
    def from_aggregate(
        cls,
        *,
        id: Any,
        participant_code: str,
        name: Optional[str],
        organisation: Optional[str],
        gender: Optional[str],
        aggregate: StationAggregate,
    ) -> "LeaderboardEntry":
        return cls(
            id=id,
            participant_code=participant_code,
            name=name or "Unknown",
            organisation=organisation or None,
            gender=gender,
            balance=aggregate.score_for(StationType.BALANCE),
            breath=aggregate.score_for(StationType.BREATH),
            grip=aggregate.score_for(StationType.GRIP),
            health=aggregate.score_for(StationType.HEALTH),
            total_score=aggregate.total_score,
            completed_stations=aggregate.completed_stations,
            grade=aggregate.grade,
            latest_completion=aggregate.latest_completion,
        )


def _canonical_key(entry: LeaderboardEntry):
    finished = entry.latest_completion
    return (
        -(entry.total_score or 0),
        finished is None,
        finished or _EPOCH,
        entry.participant_code,
        str(entry.id),
    )


def rank_entries(entries: Sequence[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Return scored entries in canonical order with dense ranks attached."""

    scored = [entry for entry in entries if entry.total_score is not None]
    ordered = sorted(scored, key=_canonical_key)
    return [replace(entry, rank=position) for position, entry in enumerate(ordered, start=1)]


@dataclass(frozen=True)
class LeaderboardQuery:
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort: str = DEFAULT_SORT
    order: str = DEFAULT_ORDER
    name_filter: str = ""
    org_filter: str = ""

    @classmethod
    def from_params(
        cls,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        name_filter: Optional[str] = None,
        org_filter: Optional[str] = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "LeaderboardQuery":
        """Build a query, clamping paging and falling back on unknown sort/order."""

        limit = default_limit if limit is None else limit
        sort = (sort or "").strip().lower()
        order = (order or "").strip().lower()
        return cls(
            limit=max(1, min(int(limit), max_limit)),
            offset=max(0, int(offset or 0)),
            sort=sort if sort in SORT_FIELDS else DEFAULT_SORT,
            order=order if order in ORDERS else DEFAULT_ORDER,
            name_filter=(name_filter or "").strip(),
            org_filter=(org_filter or "").strip(),
        )


@dataclass(frozen=True)
class LeaderboardPage:
    results: List[LeaderboardEntry]
    total: int
    limit: int
    offset: int
    has_more: bool
    query: LeaderboardQuery


def _text_key(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value else None


_SORT_KEYS: Dict[str, Callable[[LeaderboardEntry], Any]] = {
    "rank": lambda e: e.rank,
    "total_score": lambda e: e.total_score,
    "balance": lambda e: e.balance,
    "breath": lambda e: e.breath,
    "grip": lambda e: e.grip,
    "health": lambda e: e.health,
    "completed_stations": lambda e: e.completed_stations,
    "name": lambda e: _text_key(e.name),
    "organisation": lambda e: _text_key(e.organisation),
}


def filter_entries(
    entries: Sequence[LeaderboardEntry], name_filter: str = "", org_filter: str = ""
) -> List[LeaderboardEntry]:
    """Case-insensitive substring match on name and organisation (both must match)."""

    name_needle = name_filter.casefold()
    org_needle = org_filter.casefold()
    matched = []
    for entry in entries:
        if name_needle and name_needle not in (entry.name or "").casefold():
            continue
        if org_needle and org_needle not in (entry.organisation or "").casefold():
            continue
        matched.append(entry)
    return matched


def sort_entries(
    entries: Sequence[LeaderboardEntry], sort: str = DEFAULT_SORT, order: str = DEFAULT_ORDER
) -> List[LeaderboardEntry]:
    """Stable display sort; entries lacking the key trail in their incoming order."""

    key = _SORT_KEYS.get(sort, _SORT_KEYS[DEFAULT_SORT])
    present = [entry for entry in entries if key(entry) is not None]
    missing = [entry for entry in entries if key(entry) is None]
    present.sort(key=key, reverse=order == "desc")
    return present + missing


def query_leaderboard(
    ranked: Sequence[LeaderboardEntry], query: Optional[LeaderboardQuery] = None
) -> LeaderboardPage:
    """Filter, sort and paginate a canonically ranked population."""

    query = query or LeaderboardQuery()
    matched = filter_entries(ranked, query.name_filter, query.org_filter)
    ordered = sort_entries(matched, query.sort, query.order)
    total = len(ordered)
    window = ordered[query.offset : query.offset + query.limit]
    return LeaderboardPage(
        results=window,
        total=total,
        limit=query.limit,
        offset=query.offset,
        has_more=query.offset + query.limit < total,
        query=query,
    )


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_ORDER",
    "DEFAULT_SORT",
    "LeaderboardEntry",
    "LeaderboardPage",
    "LeaderboardQuery",
    "MAX_LIMIT",
    "ORDERS",
    "SORT_FIELDS",
    "filter_entries",
    "query_leaderboard",
    "rank_entries",
    "sort_entries",
]
