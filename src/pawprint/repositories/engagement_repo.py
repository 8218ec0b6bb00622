"""Data access for votes, comments and comment replies."""
from __future__ import annotations

import uuid
from collections import defaultdict
from enum import Enum
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pawprint.models import (
    ActorRef,
    Comment,
    CommentReply,
    CommentReplyVote,
    CommentVote,
    Post,
    PostVote,
    PostVoteEntry,
)

__all__ = ["EngagementRepository", "VoteTarget"]


class VoteTarget(str, Enum):
    """Kinds of entity that can be voted on."""

    POST = "post"
    COMMENT = "comment"
    REPLY = "reply"


# target -> (parent model, vote model, foreign key attribute on the vote model)
_VOTE_TABLES: dict[VoteTarget, tuple[type[Any], type[Any], str]] = {
    VoteTarget.POST: (Post, PostVoteEntry, "post_id"),
    VoteTarget.COMMENT: (Comment, CommentVote, "comment_id"),
    VoteTarget.REPLY: (CommentReply, CommentReplyVote, "reply_id"),
}


class EngagementRepository:
    """Thin wrapper around database access for engagement rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Votes

    def target_exists(self, target: VoteTarget, target_id: uuid.UUID) -> bool:
        parent_model, _, _ = _VOTE_TABLES[target]
        return self.session.get(parent_model, target_id) is not None

    def find_vote(self, target: VoteTarget, target_id: uuid.UUID, voter: ActorRef) -> Any | None:
        """Return the vote row for ``(target_id, voter)`` if one exists."""
        _, vote_model, fk = _VOTE_TABLES[target]
        stmt = select(vote_model).where(
            getattr(vote_model, fk) == target_id,
            vote_model.voter_kind == voter.kind,
            vote_model.voter_id == voter.id,
        )
        return self.session.scalars(stmt).first()

    def add_vote(self, target: VoteTarget, target_id: uuid.UUID, voter: ActorRef) -> bool:
        """Insert a vote row.

        Returns False when the unique constraint reports the vote already
        exists, which happens when two identical toggles race.
        """
        _, vote_model, fk = _VOTE_TABLES[target]
        if target is VoteTarget.POST and self.session.get(PostVote, target_id) is None:
            # Posts written before their shell committed have no shell yet.
            self.session.add(PostVote(post_id=target_id))
            self.session.flush()

        vote = vote_model(**{fk: target_id}, voter_kind=voter.kind, voter_id=voter.id)
        try:
            with self.session.begin_nested():
                self.session.add(vote)
        except IntegrityError:
            return False
        return True

    def remove_vote(self, target: VoteTarget, target_id: uuid.UUID, voter: ActorRef) -> bool:
        """Delete the vote row for ``(target_id, voter)``; False if there was none."""
        vote = self.find_vote(target, target_id, voter)
        if vote is None:
            return False
        self.session.delete(vote)
        self.session.flush()
        return True

    def voters_for(
        self, target: VoteTarget, target_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, list[ActorRef]]:
        """Return the voters of each target, oldest vote first."""
        if not target_ids:
            return {}
        _, vote_model, fk = _VOTE_TABLES[target]
        fk_column = getattr(vote_model, fk)
        stmt = (
            select(vote_model)
            .where(fk_column.in_(target_ids))
            .order_by(vote_model.created_at, vote_model.id)
        )
        voters: dict[uuid.UUID, list[ActorRef]] = defaultdict(list)
        for vote in self.session.scalars(stmt):
            voters[getattr(vote, fk)].append(vote.voter)
        return voters

    # Comments

    def get_comment(self, comment_id: uuid.UUID) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def add_comment(self, post_id: uuid.UUID, author: ActorRef, message: str) -> Comment:
        comment = Comment(
            post_id=post_id,
            author_kind=author.kind,
            author_id=author.id,
            message=message,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def latest_comments(
        self, post_ids: list[uuid.UUID], per_post: int
    ) -> dict[uuid.UUID, list[Comment]]:
        """Return up to ``per_post`` most recent comments for each post."""
        if not post_ids or per_post <= 0:
            return {}
        rank = (
            func.row_number()
            .over(
                partition_by=Comment.post_id,
                order_by=(Comment.created_at.desc(), Comment.id.desc()),
            )
            .label("rank")
        )
        ranked = (
            select(Comment.id.label("comment_id"), rank)
            .where(Comment.post_id.in_(post_ids))
            .subquery()
        )
        stmt = (
            select(Comment)
            .join(ranked, Comment.id == ranked.c.comment_id)
            .where(ranked.c.rank <= per_post)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        grouped: dict[uuid.UUID, list[Comment]] = defaultdict(list)
        for comment in self.session.scalars(stmt):
            grouped[comment.post_id].append(comment)
        return grouped

    def comments_page(self, post_id: uuid.UUID, offset: int, limit: int) -> list[Comment]:
        """Return a page of a post's comments, newest first."""
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    # Replies

    def get_reply(self, reply_id: uuid.UUID) -> CommentReply | None:
        return self.session.get(CommentReply, reply_id)

    def add_reply(self, comment_id: uuid.UUID, author: ActorRef, message: str) -> CommentReply:
        reply = CommentReply(
            parent_comment_id=comment_id,
            author_kind=author.kind,
            author_id=author.id,
            message=message,
        )
        self.session.add(reply)
        self.session.flush()
        return reply

    def replies_page(self, comment_id: uuid.UUID, offset: int, limit: int) -> list[CommentReply]:
        """Return a page of a comment's replies, oldest first."""
        stmt = (
            select(CommentReply)
            .where(CommentReply.parent_comment_id == comment_id)
            .order_by(CommentReply.created_at, CommentReply.id)
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def count_replies(self, comment_id: uuid.UUID) -> int:
        stmt = select(func.count()).where(CommentReply.parent_comment_id == comment_id)
        return self.session.scalar(stmt) or 0

    def delete(self, row: Comment | CommentReply) -> None:
        """Delete a comment or reply together with its descendants."""
        self.session.delete(row)
        self.session.flush()
