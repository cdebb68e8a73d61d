"""Listing directory — the thin CRUD the ledger and aggregator read from."""

import logging
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.errors import Forbidden, NotFound, Unauthenticated
from termhunt.models.listing import Listing
from termhunt.models.user import User
from termhunt.models.view_event import ViewEvent
from termhunt.models.vote import Vote
from termhunt.schemas.listing import ListingCreate, ListingDetail, SiteStats
from termhunt.services.votes import count_votes

logger = logging.getLogger(__name__)


async def get_listing(db: AsyncSession, listing_id: int) -> Listing:
    listing = await db.scalar(select(Listing).where(Listing.id == listing_id))
    if listing is None:
        raise NotFound("Listing not found")
    return listing


async def create_listing(db: AsyncSession, creator: Optional[User], data: ListingCreate) -> Listing:
    if creator is None:
        raise Unauthenticated()

    listing = Listing(
        name=data.name,
        short_description=data.short_description,
        description=data.description,
        repo_url=data.repo_url,
        creator_id=creator.id,
        view_count=0,
    )
    db.add(listing)
    await db.commit()
    return listing


async def get_listing_detail(db: AsyncSession, listing_id: int) -> ListingDetail:
    result = await db.execute(
        select(Listing, User.user_tag)
        .join(User, Listing.creator_id == User.id)
        .where(Listing.id == listing_id)
    )
    row = result.first()
    if row is None:
        raise NotFound("Listing not found")

    listing, user_tag = row
    return ListingDetail(
        id=listing.id,
        name=listing.name,
        short_description=listing.short_description,
        description=listing.description,
        repo_url=listing.repo_url,
        view_count=listing.view_count,
        creator_id=listing.creator_id,
        created_at=listing.created_at,
        creator_handle=user_tag,
        vote_count=await count_votes(db, listing_id),
    )


def ensure_owner(listing: Listing, user: Optional[User]) -> None:
    """Only the creator may manage a listing."""
    if user is None:
        raise Unauthenticated()
    if listing.creator_id != user.id:
        raise Forbidden("Only the creator can manage this listing")


async def delete_listing(db: AsyncSession, listing_id: int, user: Optional[User]) -> None:
    """Delete a listing with its votes and view events in one transaction."""
    listing = await get_listing(db, listing_id)
    ensure_owner(listing, user)

    await db.execute(delete(Vote).where(Vote.listing_id == listing_id))
    await db.execute(delete(ViewEvent).where(ViewEvent.listing_id == listing_id))
    await db.execute(delete(Listing).where(Listing.id == listing_id))
    await db.commit()
    logger.info(f"Listing {listing_id} deleted by user {user.id}")


async def site_stats(db: AsyncSession) -> SiteStats:
    total_listings = (await db.execute(select(func.count(Listing.id)))).scalar() or 0
    total_users = (await db.execute(select(func.count(User.id)))).scalar() or 0
    total_votes = (await db.execute(select(func.count(Vote.id)))).scalar() or 0
    return SiteStats(
        total_listings=total_listings,
        total_users=total_users,
        total_votes=total_votes,
    )
