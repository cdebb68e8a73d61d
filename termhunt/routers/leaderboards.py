"""
Leaderboards router — windowed rankings by votes or views.

Endpoints:
    GET /leaderboards/{window}           → vote and view boards together
    GET /leaderboards/{window}/{signal}  → a single board
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.config import settings
from termhunt.database import get_db
from termhunt.schemas.leaderboard import LeaderboardEntry, Leaderboards
from termhunt.services.ranking import Signal, Window, compute_leaderboard, compute_leaderboards

router = APIRouter(prefix="/leaderboards", tags=["leaderboards"])


def _limit(limit: Optional[int]) -> int:
    return limit if limit is not None else settings.LEADERBOARD_DEFAULT_LIMIT


@router.get("/{window}", response_model=Leaderboards)
async def get_leaderboards(
    window: Window,
    limit: Optional[int] = Query(None, ge=1, le=settings.LEADERBOARD_MAX_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    return await compute_leaderboards(db, window, _limit(limit))


@router.get("/{window}/{signal}", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    window: Window,
    signal: Signal,
    limit: Optional[int] = Query(None, ge=1, le=settings.LEADERBOARD_MAX_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    """Clients implement "load more" by re-requesting with a larger limit."""
    return await compute_leaderboard(db, window, signal, _limit(limit))
