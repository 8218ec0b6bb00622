"""SQLAlchemy models for posts and their hashtags."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawprint.db.session import Base
from pawprint.db.time import utcnow
from pawprint.models.actor import ActorKind, ActorRef, actor_kind_column

if TYPE_CHECKING:
    from pawprint.models.comment import Comment
    from pawprint.models.vote import PostVote


class Post(Base):
    """An image post.

    Posts are immutable after creation apart from deletion by their author.
    Deleting a post removes its vote shell, hashtags and every comment row
    hanging off it.
    """

    __tablename__ = "post"
    __table_args__ = (Index("ix_post_author_created", "author_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    image: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)
    filter: Mapped[str] = mapped_column(Text, nullable=False, default="")
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Actor the post is published on behalf of, e.g. a guardian posting as their pet.
    owner_kind: Mapped[ActorKind | None] = mapped_column(actor_kind_column(), nullable=True)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    hashtag_rows: Mapped[list[PostHashtag]] = relationship(
        "PostHashtag",
        cascade="all, delete-orphan",
        order_by="PostHashtag.position",
        lazy="selectin",
    )
    vote_shell: Mapped[PostVote | None] = relationship(
        "PostVote",
        cascade="all, delete-orphan",
        uselist=False,
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        cascade="all, delete-orphan",
    )

    @property
    def hashtags(self) -> list[str]:
        """Return hashtags in the order they first appeared in the caption."""
        return [row.tag for row in self.hashtag_rows]

    @hashtags.setter
    def hashtags(self, tags: list[str]) -> None:
        self.hashtag_rows = [PostHashtag(tag=tag, position=i) for i, tag in enumerate(tags)]

    @property
    def owner(self) -> ActorRef | None:
        """Return the owner reference, if the post was made on someone's behalf."""
        if self.owner_kind is None or self.owner_id is None:
            return None
        return ActorRef(self.owner_kind, self.owner_id)


class PostHashtag(Base):
    """A single hashtag attached to a post."""

    __tablename__ = "post_hashtag"
    __table_args__ = (
        UniqueConstraint("post_id", "tag", name="uq_post_hashtag"),
        Index("ix_post_hashtag_tag", "tag"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
