"""
Votes router — toggle, remove, and check a user's vote on a listing.

Endpoints:
    POST   /listings/{listing_id}/vote         → toggle vote
    DELETE /listings/{listing_id}/vote         → remove vote (idempotent)
    GET    /listings/{listing_id}/vote-status  → has the caller voted?
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.database import get_db
from termhunt.models.user import User
from termhunt.routers.auth import get_current_user
from termhunt.schemas.vote import VoteResult, VoteStatus
from termhunt.services import votes

router = APIRouter(prefix="/listings", tags=["votes"])


def _user_id(user: Optional[User]) -> Optional[int]:
    return user.id if user else None


@router.post("/{listing_id}/vote", response_model=VoteResult)
async def toggle_vote(
    listing_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await votes.toggle_vote(db, _user_id(current_user), listing_id)


@router.delete("/{listing_id}/vote", response_model=VoteResult)
async def remove_vote(
    listing_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await votes.remove_vote(db, _user_id(current_user), listing_id)


@router.get("/{listing_id}/vote-status", response_model=VoteStatus)
async def vote_status(
    listing_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Anonymous callers always get ``hasVoted: false``."""
    return VoteStatus(has_voted=await votes.has_voted(db, _user_id(current_user), listing_id))
