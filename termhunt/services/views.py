"""
View counter — append a ViewEvent and bump ``Listing.view_count``.

Both writes go out in one transaction, so the log and the denormalized
counter either both advance or neither does.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.errors import NotFound
from termhunt.models.listing import Listing
from termhunt.models.view_event import ViewEvent
from termhunt.schemas.view import ViewResult

logger = logging.getLogger(__name__)


async def record_view(db: AsyncSession, listing_id: int) -> ViewResult:
    listing = await db.scalar(select(Listing.id).where(Listing.id == listing_id))
    if listing is None:
        raise NotFound("Listing not found")

    try:
        db.add(ViewEvent(listing_id=listing_id))
        await db.execute(
            update(Listing)
            .where(Listing.id == listing_id)
            .values(view_count=Listing.view_count + 1)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to record view for listing {listing_id}: {e}")
        raise

    return ViewResult(success=True)


async def count_view_events(db: AsyncSession, listing_id: int) -> int:
    result = await db.execute(
        select(func.count(ViewEvent.id)).where(ViewEvent.listing_id == listing_id)
    )
    return result.scalar() or 0


async def reconcile_view_count(db: AsyncSession, listing_id: int) -> int:
    """Reset the denormalized counter to the length of the view log."""
    previous = await db.scalar(select(Listing.view_count).where(Listing.id == listing_id))
    if previous is None:
        raise NotFound("Listing not found")

    # Counted and written by the same statement
    logged = (
        select(func.count(ViewEvent.id))
        .where(ViewEvent.listing_id == listing_id)
        .scalar_subquery()
    )
    await db.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(view_count=logged)
        .execution_options(synchronize_session="fetch")
    )
    view_count = await db.scalar(select(Listing.view_count).where(Listing.id == listing_id))
    await db.commit()

    if view_count != previous:
        logger.info(f"Reconciled view_count for listing {listing_id}: {previous} -> {view_count}")
    return view_count
