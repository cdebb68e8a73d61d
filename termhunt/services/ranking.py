"""
Ranking aggregator — time-windowed leaderboards over votes or views.

A leaderboard is computed on demand from the Vote / ViewEvent logs:
events inside ``[window start, now]`` are grouped per listing, counted,
and ordered by count descending. Equal counts fall back to the listing's
creation time (oldest first) and then its id, so identical inputs over
unchanged data always produce the same ordering.
"""

import enum
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.models.listing import Listing
from termhunt.models.user import User
from termhunt.models.view_event import ViewEvent
from termhunt.models.vote import Vote
from termhunt.schemas.leaderboard import LeaderboardEntry, Leaderboards


class Window(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ALL_TIME = "all_time"


class Signal(str, enum.Enum):
    VOTES = "votes"
    VIEWS = "views"


# Fixed-duration lookbacks, not calendar-aligned
WINDOW_SPANS = {
    Window.DAILY: timedelta(days=1),
    Window.WEEKLY: timedelta(days=7),
    Window.MONTHLY: timedelta(days=30),
    Window.YEARLY: timedelta(days=365),
}


def window_start(window: Window, now: datetime) -> Optional[datetime]:
    """Earliest timestamp included in ``window``; None means unbounded."""
    span = WINDOW_SPANS.get(Window(window))
    if span is None:
        return None
    return now - span


def _event_columns(signal: Signal):
    """(listing fk, id, timestamp) columns of the log backing ``signal``."""
    if Signal(signal) is Signal.VOTES:
        return Vote.listing_id, Vote.id, Vote.created_at
    return ViewEvent.listing_id, ViewEvent.id, ViewEvent.viewed_at


async def compute_leaderboard(
    db: AsyncSession,
    window: Window,
    signal: Signal,
    limit: int,
    now: Optional[datetime] = None,
) -> List[LeaderboardEntry]:
    """
    Rank listings by the number of ``signal`` events inside ``window``.

    Returns at most ``limit`` entries. An empty window is an empty list,
    not an error; storage failures propagate.
    """
    if limit <= 0:
        return []

    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    start = window_start(window, now)
    listing_fk, event_id, happened_at = _event_columns(signal)

    count_col = func.count(event_id).label("count")
    stmt = (
        select(listing_fk, Listing.name, User.user_tag, count_col)
        .join(Listing, listing_fk == Listing.id)
        .join(User, Listing.creator_id == User.id)
        .where(happened_at <= now)
        .group_by(listing_fk, Listing.name, User.user_tag, Listing.created_at)
        .order_by(desc(count_col), Listing.created_at.asc(), listing_fk.asc())
        .limit(limit)
    )
    if start is not None:
        stmt = stmt.where(happened_at >= start)

    result = await db.execute(stmt)
    return [
        LeaderboardEntry(
            listing_id=listing_id,
            name=name,
            creator_handle=user_tag,
            count=count,
        )
        for listing_id, name, user_tag, count in result.all()
    ]


async def compute_leaderboards(
    db: AsyncSession,
    window: Window,
    limit: int,
    now: Optional[datetime] = None,
) -> Leaderboards:
    """Vote and view boards for the same window, evaluated at the same instant."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    window = Window(window)
    return Leaderboards(
        window=window.value,
        start_date=window_start(window, now),
        vote_leaderboard=await compute_leaderboard(db, window, Signal.VOTES, limit, now=now),
        view_leaderboard=await compute_leaderboard(db, window, Signal.VIEWS, limit, now=now),
    )
