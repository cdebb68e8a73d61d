"""
Listings router — the directory the ledger and leaderboards hang off.

Endpoints:
    POST   /listings                               → create listing
    GET    /listings/{listing_id}                  → detail with vote count
    DELETE /listings/{listing_id}                  → delete (creator only)
    POST   /listings/{listing_id}/view             → record a page view
    POST   /listings/{listing_id}/views/reconcile  → resync view_count (creator only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.database import get_db
from termhunt.models.user import User
from termhunt.routers.auth import get_current_user, require_user
from termhunt.schemas.listing import ListingCreate, ListingDetail, ListingOut
from termhunt.schemas.view import ViewCountOut, ViewResult
from termhunt.services import listings, views

router = APIRouter(prefix="/listings", tags=["listings"])


@router.post("", response_model=ListingOut, status_code=status.HTTP_201_CREATED)
async def create_listing(
    payload: ListingCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await listings.create_listing(db, current_user, payload)


@router.get("/{listing_id}", response_model=ListingDetail)
async def read_listing(listing_id: int, db: AsyncSession = Depends(get_db)):
    return await listings.get_listing_detail(db, listing_id)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await listings.delete_listing(db, listing_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ═══════════════════════════════════════════════════════════════
#  Views
# ═══════════════════════════════════════════════════════════════

@router.post("/{listing_id}/view", response_model=ViewResult)
async def record_view(listing_id: int, db: AsyncSession = Depends(get_db)):
    """Fired by the detail page on first paint; not deduplicated."""
    return await views.record_view(db, listing_id)


@router.post("/{listing_id}/views/reconcile", response_model=ViewCountOut)
async def reconcile_views(
    listing_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    listing = await listings.get_listing(db, listing_id)
    listings.ensure_owner(listing, current_user)
    view_count = await views.reconcile_view_count(db, listing_id)
    return ViewCountOut(listing_id=listing_id, view_count=view_count)
