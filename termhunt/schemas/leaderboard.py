"""Leaderboard projections (derived, never persisted)."""

from datetime import datetime
from typing import List, Optional

from termhunt.schemas.base import CamelModel


class LeaderboardEntry(CamelModel):
    listing_id: int
    name: str
    creator_handle: str
    count: int


class Leaderboards(CamelModel):
    """Both boards for one window, as served by ``GET /leaderboards/{window}``."""
    window: str
    start_date: Optional[datetime] = None
    vote_leaderboard: List[LeaderboardEntry]
    view_leaderboard: List[LeaderboardEntry]
