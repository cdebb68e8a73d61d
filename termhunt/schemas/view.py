"""View counter response schemas."""

from termhunt.schemas.base import CamelModel


class ViewResult(CamelModel):
    success: bool = True


class ViewCountOut(CamelModel):
    listing_id: int
    view_count: int
