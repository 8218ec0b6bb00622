"""Data access helpers for working with posts."""
from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pawprint.models import ActorRef, Comment, Post, PostVote, PostVoteEntry

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: uuid.UUID) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def get_owned(self, post_id: uuid.UUID, author_id: uuid.UUID) -> Post | None:
        """Return the post only if ``author_id`` wrote it."""
        return self.session.scalars(
            select(Post).where(Post.id == post_id, Post.author_id == author_id)
        ).first()

    def create(
        self,
        *,
        author_id: uuid.UUID,
        image: str,
        thumbnail: str,
        filter_css: str,
        caption: str | None,
        hashtags: list[str],
        owner: ActorRef | None = None,
    ) -> Post:
        """Insert a new post followed by its empty vote shell.

        The rows are flushed in that order; committing is left to the caller.
        """
        post = Post(
            author_id=author_id,
            image=image,
            thumbnail=thumbnail,
            filter=filter_css,
            caption=caption,
            owner_kind=owner.kind if owner else None,
            owner_id=owner.id if owner else None,
        )
        post.hashtags = hashtags
        self.session.add(post)
        self.session.flush()

        self.session.add(PostVote(post_id=post.id))
        self.session.flush()
        return post

    def delete(self, post: Post) -> None:
        """Delete a post; ORM cascades remove every engagement row below it."""
        self.session.delete(post)
        self.session.flush()

    def list_by_author(self, author_id: uuid.UUID, offset: int, limit: int) -> list[Post]:
        """Return an author's posts, newest first."""
        stmt = (
            select(Post)
            .where(Post.author_id == author_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def count_votes(self, post_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        """Return the number of voters per post."""
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(PostVoteEntry.post_id, func.count())
            .where(PostVoteEntry.post_id.in_(post_ids))
            .group_by(PostVoteEntry.post_id)
        )
        return {post_id: count for post_id, count in rows}

    def count_comments(self, post_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        """Return the number of comments per post, independent of any page cap."""
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
        )
        return {post_id: count for post_id, count in rows}
