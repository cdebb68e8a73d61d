"""
Termhunt — FastAPI application entry-point.

Run with:
    uvicorn termhunt.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.config import settings
from termhunt.database import Base, engine, get_db
import termhunt.models  # noqa: F401  (registers tables on Base.metadata)
from termhunt.schemas.listing import SiteStats
from termhunt.services.listings import site_stats

# ── Import routers ──
from termhunt.routers import leaderboards, listings, votes

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} started")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Product Hunt for terminal apps — votes, views and leaderboards.",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Register API routers ──
app.include_router(listings.router)
app.include_router(votes.router)
app.include_router(leaderboards.router)


@app.get("/stats", response_model=SiteStats)
async def stats(db: AsyncSession = Depends(get_db)):
    """Site-wide totals shown on the landing page."""
    return await site_stats(db)


@app.get("/health")
async def health():
    return {"status": "ok"}
