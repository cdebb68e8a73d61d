"""
Vote ledger — one endorsement per (user, listing), toggled on repeat.

Each mutating call runs its read-check-write in a single transaction. The
``unique_user_listing_vote`` constraint is the backstop for two toggles
racing on the same pair: the loser's insert raises ``IntegrityError``, is
rolled back, and the toggle is retried from scratch so it observes the
winner's row. The withdraw direction is symmetric: a delete that finds no
row means another toggle got there first, so the toggle retries and
re-casts the vote.
"""

import logging
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.config import settings
from termhunt.errors import Conflict, NotFound, Unauthenticated
from termhunt.models.listing import Listing
from termhunt.models.user import User
from termhunt.models.vote import Vote
from termhunt.schemas.vote import VoteResult

logger = logging.getLogger(__name__)


async def count_votes(db: AsyncSession, listing_id: int) -> int:
    """Number of Vote rows referencing the listing right now."""
    result = await db.execute(
        select(func.count(Vote.id)).where(Vote.listing_id == listing_id)
    )
    return result.scalar() or 0


async def _check_refs(db: AsyncSession, user_id: Optional[int], listing_id: int) -> None:
    if user_id is None:
        raise Unauthenticated()

    listing = await db.scalar(select(Listing.id).where(Listing.id == listing_id))
    if listing is None:
        raise NotFound("Listing not found")

    user = await db.scalar(select(User.id).where(User.id == user_id))
    if user is None:
        raise NotFound("User not found")


async def toggle_vote(db: AsyncSession, user_id: Optional[int], listing_id: int) -> VoteResult:
    """
    Cast the caller's vote if absent, withdraw it if present.

    Returns the new state and the listing's vote count as seen inside the
    same transaction. Raises ``Conflict`` if every attempt collided with a
    concurrent writer.
    """
    attempts = max(settings.VOTE_CONFLICT_RETRIES, 1)
    for attempt in range(1, attempts + 1):
        await _check_refs(db, user_id, listing_id)

        existing = await db.scalar(
            select(Vote.id).where(Vote.user_id == user_id, Vote.listing_id == listing_id)
        )
        try:
            if existing is not None:
                result = await db.execute(delete(Vote).where(Vote.id == existing))
                if result.rowcount == 0:
                    # A concurrent toggle withdrew it first; retry so this one re-casts
                    await db.rollback()
                    logger.warning(
                        f"Vote on listing {listing_id} by user {user_id} vanished before delete "
                        f"(attempt {attempt}/{attempts})"
                    )
                    continue
                voted = False
            else:
                db.add(Vote(user_id=user_id, listing_id=listing_id))
                await db.flush()
                voted = True
            vote_count = await count_votes(db, listing_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                f"Vote conflict for user {user_id} on listing {listing_id} "
                f"(attempt {attempt}/{attempts})"
            )
            continue

        logger.info(
            f"User {user_id} {'voted for' if voted else 'withdrew vote from'} "
            f"listing {listing_id} (count={vote_count})"
        )
        return VoteResult(voted=voted, vote_count=vote_count)

    logger.error(f"Vote toggle for user {user_id} on listing {listing_id} gave up after {attempts} attempts")
    raise Conflict()


async def remove_vote(db: AsyncSession, user_id: Optional[int], listing_id: int) -> VoteResult:
    """Delete the caller's vote unconditionally. A missing vote is not an error."""
    await _check_refs(db, user_id, listing_id)

    result = await db.execute(
        delete(Vote).where(Vote.user_id == user_id, Vote.listing_id == listing_id)
    )
    vote_count = await count_votes(db, listing_id)
    await db.commit()

    if result.rowcount:
        logger.info(f"User {user_id} removed vote from listing {listing_id} (count={vote_count})")
    return VoteResult(voted=False, vote_count=vote_count)


async def has_voted(db: AsyncSession, user_id: Optional[int], listing_id: int) -> bool:
    """Whether the user currently has a vote on the listing. Anonymous → False."""
    if user_id is None:
        return False
    vote_id = await db.scalar(
        select(Vote.id).where(Vote.user_id == user_id, Vote.listing_id == listing_id)
    )
    return vote_id is not None
