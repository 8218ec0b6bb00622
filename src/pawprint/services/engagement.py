"""Votes, comments and replies.

Vote toggles are idempotent from the caller's point of view: voting twice or
removing a vote that does not exist both succeed without changing anything.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from pawprint.core.errors import NotFound
from pawprint.models import Comment, CommentReply, User
from pawprint.repositories import EngagementRepository, VoteTarget
from pawprint.schemas.actor import AuthorDetails, VoterDetails
from pawprint.services.actors import can_act_as, resolve_acting_actor

logger = logging.getLogger(__name__)

_NOT_FOUND = {
    VoteTarget.POST: "Could not find a post with that id.",
    VoteTarget.COMMENT: "Could not find a comment with that id.",
    VoteTarget.REPLY: "Could not find a reply with that id.",
}


def toggle_vote(
    db: Session,
    user: User,
    target: VoteTarget,
    target_id: uuid.UUID,
    voter_details: VoterDetails,
    vote: bool,
) -> None:
    """Add (``vote=True``) or remove (``vote=False``) a vote."""
    repo = EngagementRepository(db)
    if not repo.target_exists(target, target_id):
        raise NotFound(_NOT_FOUND[target])

    voter = resolve_acting_actor(
        db, user, voter_details.voter_type, voter_details.voter_id, field="voterId"
    )
    if vote:
        if repo.find_vote(target, target_id, voter) is not None:
            return
        if not repo.add_vote(target, target_id, voter):
            logger.debug("Concurrent duplicate %s vote by %s ignored", target.value, voter.id)
        return

    repo.remove_vote(target, target_id, voter)


def add_comment(
    db: Session,
    user: User,
    post_id: uuid.UUID,
    message: str,
    author_details: AuthorDetails,
) -> Comment:
    repo = EngagementRepository(db)
    if not repo.target_exists(VoteTarget.POST, post_id):
        raise NotFound(_NOT_FOUND[VoteTarget.POST])
    author = resolve_acting_actor(
        db, user, author_details.author_type, author_details.author_id, field="authorId"
    )
    return repo.add_comment(post_id, author, message)


def _owned_comment(db: Session, user: User, comment_id: uuid.UUID) -> Comment:
    comment = EngagementRepository(db).get_comment(comment_id)
    if comment is None or not can_act_as(db, user, comment.author_ref):
        raise NotFound("Could not find a comment with that id associated with the user.")
    return comment


def edit_comment(db: Session, user: User, comment_id: uuid.UUID, message: str) -> None:
    comment = _owned_comment(db, user, comment_id)
    comment.message = message
    db.flush()


def delete_comment(db: Session, user: User, comment_id: uuid.UUID) -> None:
    """Delete a comment with its votes, replies and reply votes."""
    EngagementRepository(db).delete(_owned_comment(db, user, comment_id))


def add_reply(
    db: Session,
    user: User,
    comment_id: uuid.UUID,
    message: str,
    author_details: AuthorDetails,
) -> CommentReply:
    repo = EngagementRepository(db)
    if repo.get_comment(comment_id) is None:
        raise NotFound(_NOT_FOUND[VoteTarget.COMMENT])
    author = resolve_acting_actor(
        db, user, author_details.author_type, author_details.author_id, field="authorId"
    )
    return repo.add_reply(comment_id, author, message)


def _owned_reply(db: Session, user: User, reply_id: uuid.UUID) -> CommentReply:
    reply = EngagementRepository(db).get_reply(reply_id)
    if reply is None or not can_act_as(db, user, reply.author_ref):
        raise NotFound("Could not find a reply with that id associated with the user.")
    return reply


def edit_reply(db: Session, user: User, reply_id: uuid.UUID, message: str) -> None:
    reply = _owned_reply(db, user, reply_id)
    reply.message = message
    db.flush()


def delete_reply(db: Session, user: User, reply_id: uuid.UUID) -> None:
    """Delete a reply with its votes."""
    EngagementRepository(db).delete(_owned_reply(db, user, reply_id))
