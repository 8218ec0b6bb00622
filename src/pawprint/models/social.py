"""Social graph records: who an actor follows and who follows them.

Both sides are written by the follow service; the feed only reads them.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawprint.db.session import Base
from pawprint.models.actor import ActorKind, ActorRef, actor_kind_column


class Following(Base):
    """Header row listing the actors ``actor_id`` follows."""

    __tablename__ = "following"

    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    actor_kind: Mapped[ActorKind] = mapped_column(
        actor_kind_column(), nullable=False, default=ActorKind.HUMAN
    )

    entries: Mapped[list[FollowingEntry]] = relationship(
        "FollowingEntry",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def followed(self) -> list[ActorRef]:
        """Return the followed actors."""
        return [ActorRef(entry.followed_kind, entry.followed_id) for entry in self.entries]


class FollowingEntry(Base):
    """One followed actor."""

    __tablename__ = "following_entry"
    __table_args__ = (
        UniqueConstraint("actor_id", "followed_kind", "followed_id", name="uq_following_entry"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    actor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("following.actor_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    followed_kind: Mapped[ActorKind] = mapped_column(actor_kind_column(), nullable=False)
    followed_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)


class Followers(Base):
    """Header row listing the actors that follow ``actor_id``."""

    __tablename__ = "followers"

    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    actor_kind: Mapped[ActorKind] = mapped_column(
        actor_kind_column(), nullable=False, default=ActorKind.HUMAN
    )

    entries: Mapped[list[FollowerEntry]] = relationship(
        "FollowerEntry",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def followers(self) -> list[ActorRef]:
        """Return the following actors."""
        return [ActorRef(entry.follower_kind, entry.follower_id) for entry in self.entries]


class FollowerEntry(Base):
    """One follower."""

    __tablename__ = "follower_entry"
    __table_args__ = (
        UniqueConstraint("actor_id", "follower_kind", "follower_id", name="uq_follower_entry"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    actor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("followers.actor_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    follower_kind: Mapped[ActorKind] = mapped_column(actor_kind_column(), nullable=False)
    follower_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
