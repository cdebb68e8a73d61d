"""Listing model — a submitted terminal app."""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from termhunt.database import Base, utcnow


class Listing(Base):
    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    short_description: Mapped[Optional[str]] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    repo_url: Mapped[Optional[str]] = mapped_column(String(255))

    # Denormalized; kept in lockstep with view_events by services.views
    view_count: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    # ── Relationships ──
    creator: Mapped["User"] = relationship("User", back_populates="listings")  # noqa: F821
