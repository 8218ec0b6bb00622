"""Actor-related Pydantic schemas."""

from __future__ import annotations

import uuid

from pydantic import Field

from pawprint.models.actor import ActorKind, ActorRef

from .common import CamelModel


class VoterDetails(CamelModel):
    """Who a vote is cast as.

    ``voter_id`` is only read for animal voters; human voters always vote as
    the authenticated user.
    """

    voter_type: ActorKind = ActorKind.HUMAN
    voter_id: str | None = None


class AuthorDetails(CamelModel):
    """Who a comment or reply is written as."""

    author_type: ActorKind = ActorKind.HUMAN
    author_id: str | None = None


class VoterOut(CamelModel):
    """A voter reference as returned to clients."""

    voter_type: ActorKind
    voter_id: uuid.UUID

    @classmethod
    def from_ref(cls, ref: ActorRef) -> VoterOut:
        return cls(voter_type=ref.kind, voter_id=ref.id)


class AuthorSummary(CamelModel):
    """Minimal author shape pushed with freshly created posts."""

    username: str
    avatar: str | None = None


class PublicAuthor(AuthorSummary):
    """Redacted author projection.

    This is the only author shape that may leave the server. It is a
    whitelist: private columns on the underlying records never reach it.
    """

    id: uuid.UUID
    kind: ActorKind = Field(default=ActorKind.HUMAN)
    full_name: str | None = None
