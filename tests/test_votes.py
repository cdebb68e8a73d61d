"""Tests for the vote ledger service."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from termhunt.config import settings
from termhunt.errors import Conflict, NotFound, Unauthenticated
from termhunt.models.vote import Vote
from termhunt.services import votes

from tests.factories import make_listing


async def _rows(db, user_id, listing_id) -> int:
    result = await db.execute(
        select(func.count(Vote.id)).where(Vote.user_id == user_id, Vote.listing_id == listing_id)
    )
    return result.scalar()


class TestToggleVote:
    async def test_first_toggle_casts_vote(self, db, alice, listing):
        result = await votes.toggle_vote(db, alice.id, listing.id)

        assert result.voted is True
        assert result.vote_count == 1
        assert await _rows(db, alice.id, listing.id) == 1

    async def test_toggle_pair_restores_state(self, db, alice, listing):
        first = await votes.toggle_vote(db, alice.id, listing.id)
        second = await votes.toggle_vote(db, alice.id, listing.id)

        assert (first.voted, first.vote_count) == (True, 1)
        assert (second.voted, second.vote_count) == (False, 0)
        assert await _rows(db, alice.id, listing.id) == 0

    async def test_count_reflects_all_voters(self, db, alice, bob, listing):
        await votes.toggle_vote(db, alice.id, listing.id)
        result = await votes.toggle_vote(db, bob.id, listing.id)

        assert result.vote_count == 2
        assert await votes.count_votes(db, listing.id) == 2

    async def test_creator_may_vote_for_own_listing(self, db, alice, listing):
        assert listing.creator_id == alice.id
        result = await votes.toggle_vote(db, alice.id, listing.id)
        assert result.voted is True

    async def test_votes_are_per_listing(self, db, alice, listing):
        other = await make_listing(db, alice, "btop")
        await votes.toggle_vote(db, alice.id, listing.id)

        assert await votes.count_votes(db, other.id) == 0

    async def test_missing_listing(self, db, alice):
        with pytest.raises(NotFound):
            await votes.toggle_vote(db, alice.id, 9999)

    async def test_missing_user(self, db, listing):
        with pytest.raises(NotFound):
            await votes.toggle_vote(db, 9999, listing.id)

    async def test_anonymous(self, db, listing):
        with pytest.raises(Unauthenticated):
            await votes.toggle_vote(db, None, listing.id)


class TestConflictHandling:
    async def test_unique_constraint_rejects_duplicate_row(self, db, alice, listing):
        user_id, listing_id = alice.id, listing.id
        db.add(Vote(user_id=user_id, listing_id=listing_id))
        await db.commit()

        db.add(Vote(user_id=user_id, listing_id=listing_id))
        with pytest.raises(IntegrityError):
            await db.commit()
        await db.rollback()

        assert await _rows(db, user_id, listing_id) == 1

    async def test_retries_after_integrity_error(self, db, alice, listing, monkeypatch):
        user_id, listing_id = alice.id, listing.id
        real_flush = AsyncSession.flush
        calls = {"n": 0}

        async def flaky_flush(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))
            return await real_flush(db, *args, **kwargs)

        monkeypatch.setattr(db, "flush", flaky_flush)
        result = await votes.toggle_vote(db, user_id, listing_id)

        assert calls["n"] == 2
        assert result.voted is True
        assert result.vote_count == 1
        assert await _rows(db, user_id, listing_id) == 1

    async def test_gives_up_with_conflict_and_leaves_ledger_unchanged(
        self, db, alice, listing, monkeypatch
    ):
        user_id, listing_id = alice.id, listing.id

        async def always_conflicts(*args, **kwargs):
            raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(db, "flush", always_conflicts)
        with pytest.raises(Conflict):
            await votes.toggle_vote(db, user_id, listing_id)
        monkeypatch.undo()

        assert await _rows(db, user_id, listing_id) == 0

    async def test_retry_budget_follows_settings(self, db, alice, listing, monkeypatch):
        user_id, listing_id = alice.id, listing.id
        calls = {"n": 0}

        async def always_conflicts(*args, **kwargs):
            calls["n"] += 1
            raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(settings, "VOTE_CONFLICT_RETRIES", 5)
        monkeypatch.setattr(db, "flush", always_conflicts)
        with pytest.raises(Conflict):
            await votes.toggle_vote(db, user_id, listing_id)

        assert calls["n"] == 5


class TestRemoveVote:
    async def test_removes_existing_vote(self, db, alice, bob, listing):
        await votes.toggle_vote(db, alice.id, listing.id)
        await votes.toggle_vote(db, bob.id, listing.id)

        result = await votes.remove_vote(db, alice.id, listing.id)

        assert result.voted is False
        assert result.vote_count == 1

    async def test_idempotent_without_vote(self, db, alice, listing):
        first = await votes.remove_vote(db, alice.id, listing.id)
        second = await votes.remove_vote(db, alice.id, listing.id)

        assert first.voted is False and first.vote_count == 0
        assert second == first

    async def test_missing_listing(self, db, alice):
        with pytest.raises(NotFound):
            await votes.remove_vote(db, alice.id, 9999)


class TestHasVoted:
    async def test_tracks_toggle(self, db, alice, listing):
        assert await votes.has_voted(db, alice.id, listing.id) is False
        await votes.toggle_vote(db, alice.id, listing.id)
        assert await votes.has_voted(db, alice.id, listing.id) is True

    async def test_anonymous_is_false(self, db, listing):
        assert await votes.has_voted(db, None, listing.id) is False
