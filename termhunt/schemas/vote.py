"""Vote ledger response schemas."""

from termhunt.schemas.base import CamelModel


class VoteResult(CamelModel):
    voted: bool
    vote_count: int


class VoteStatus(CamelModel):
    has_voted: bool
