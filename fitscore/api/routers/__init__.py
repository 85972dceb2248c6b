"""Aggregate API routers."""

from fastapi import APIRouter

from .leaderboard import router as leaderboard_router
from .participants import router as participants_router
from .station_results import router as station_results_router
from .stations import router as stations_router
from .system import router as system_router
from .thresholds import router as thresholds_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    stations_router,
    participants_router,
    station_results_router,
    leaderboard_router,
    thresholds_router,
)

__all__ = ["ALL_ROUTERS"]
