"""Models for comments and comment replies."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawprint.db.session import Base
from pawprint.db.time import utcnow
from pawprint.models.actor import AuthoredMixin
from pawprint.models.vote import CommentReplyVote, CommentVote


class Comment(AuthoredMixin, Base):
    """A comment on a post."""

    __tablename__ = "comment"
    __table_args__ = (Index("ix_comment_post_created", "post_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    votes: Mapped[list[CommentVote]] = relationship(
        "CommentVote",
        cascade="all, delete-orphan",
    )
    replies: Mapped[list[CommentReply]] = relationship(
        "CommentReply",
        cascade="all, delete-orphan",
    )


class CommentReply(AuthoredMixin, Base):
    """A reply nested under a comment."""

    __tablename__ = "comment_reply"
    __table_args__ = (Index("ix_comment_reply_parent_created", "parent_comment_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_comment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    votes: Mapped[list[CommentReplyVote]] = relationship(
        "CommentReplyVote",
        cascade="all, delete-orphan",
    )
