"""Listing Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from termhunt.schemas.base import CamelModel


class ListingCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    short_description: Optional[str] = Field(None, max_length=200)
    description: str = ""
    repo_url: Optional[str] = Field(None, max_length=255)


class ListingOut(CamelModel):
    id: int
    name: str
    short_description: Optional[str] = None
    description: str
    repo_url: Optional[str] = None
    view_count: int
    creator_id: int
    created_at: Optional[datetime] = None


class ListingDetail(ListingOut):
    creator_handle: str
    vote_count: int


class SiteStats(CamelModel):
    total_listings: int
    total_users: int
    total_votes: int
