"""Models capturing voting interactions on posts, comments and replies."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawprint.db.session import Base
from pawprint.db.time import utcnow
from pawprint.models.actor import VoterMixin


class PostVote(Base):
    """Vote shell created alongside each post.

    The shell holds the set of voters; an empty shell means no votes yet.
    """

    __tablename__ = "post_vote"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )

    entries: Mapped[list[PostVoteEntry]] = relationship(
        "PostVoteEntry",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PostVoteEntry(VoterMixin, Base):
    """A single voter on a post."""

    __tablename__ = "post_vote_entry"
    # One vote per (post, voter); the check-then-insert path relies on this.
    __table_args__ = (
        UniqueConstraint("post_id", "voter_kind", "voter_id", name="uq_post_vote_entry"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post_vote.post_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class CommentVote(VoterMixin, Base):
    """A single voter on a comment."""

    __tablename__ = "comment_vote"
    __table_args__ = (
        UniqueConstraint("comment_id", "voter_kind", "voter_id", name="uq_comment_vote"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class CommentReplyVote(VoterMixin, Base):
    """A single voter on a comment reply."""

    __tablename__ = "comment_reply_vote"
    __table_args__ = (
        UniqueConstraint("reply_id", "voter_kind", "voter_id", name="uq_comment_reply_vote"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reply_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("comment_reply.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
