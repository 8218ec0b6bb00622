# src/pawprint/api/v1/endpoints/comments.py
"""Comment, reply and comment vote endpoints."""

from fastapi import APIRouter

from pawprint.core.security import parse_id
from pawprint.repositories import VoteTarget
from pawprint.schemas import (
    Ack,
    CommentCreate,
    MessageEdit,
    ReplyCreate,
    ReplyPage,
    VoteRequest,
)
from pawprint.services import engagement
from pawprint.services.feed import FeedAggregator

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=Ack)
async def create_comment(payload: CommentCreate, current_user: CurrentUserDep, db: SessionDep) -> Ack:
    """Comment on a post as the caller or as an animal they look after."""
    engagement.add_comment(
        db,
        current_user,
        parse_id(payload.post_id, "postId"),
        payload.message,
        payload.author_details,
    )
    db.commit()
    return Ack()


@router.put("/{comment_id}", response_model=Ack)
async def edit_comment(
    comment_id: str,
    payload: MessageEdit,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    engagement.edit_comment(db, current_user, parse_id(comment_id, "commentId"), payload.message)
    db.commit()
    return Ack()


@router.delete("/{comment_id}", response_model=Ack)
async def delete_comment(comment_id: str, current_user: CurrentUserDep, db: SessionDep) -> Ack:
    """Delete a comment along with its votes and replies."""
    engagement.delete_comment(db, current_user, parse_id(comment_id, "commentId"))
    db.commit()
    return Ack()


@router.post("/{comment_id}/vote", response_model=Ack)
async def vote_comment(
    comment_id: str,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    engagement.toggle_vote(
        db,
        current_user,
        VoteTarget.COMMENT,
        parse_id(comment_id, "commentId"),
        payload.voter_details,
        payload.vote,
    )
    db.commit()
    return Ack()


@router.post("/{comment_id}/replies", response_model=Ack)
async def create_reply(
    comment_id: str,
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    """Reply to a comment."""
    engagement.add_reply(
        db,
        current_user,
        parse_id(comment_id, "commentId"),
        payload.message,
        payload.author_details,
    )
    db.commit()
    return Ack()


@router.get("/{comment_id}/replies/{offset}", response_model=ReplyPage)
async def get_replies(comment_id: str, offset: int, db: SessionDep) -> ReplyPage:
    """Return a page of replies to a comment, oldest first."""
    return FeedAggregator(db).get_replies(parse_id(comment_id, "commentId"), offset)


@router.put("/replies/{reply_id}", response_model=Ack)
async def edit_reply(
    reply_id: str,
    payload: MessageEdit,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    engagement.edit_reply(db, current_user, parse_id(reply_id, "replyId"), payload.message)
    db.commit()
    return Ack()


@router.delete("/replies/{reply_id}", response_model=Ack)
async def delete_reply(reply_id: str, current_user: CurrentUserDep, db: SessionDep) -> Ack:
    engagement.delete_reply(db, current_user, parse_id(reply_id, "replyId"))
    db.commit()
    return Ack()


@router.post("/replies/{reply_id}/vote", response_model=Ack)
async def vote_reply(
    reply_id: str,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    engagement.toggle_vote(
        db,
        current_user,
        VoteTarget.REPLY,
        parse_id(reply_id, "replyId"),
        payload.voter_details,
        payload.vote,
    )
    db.commit()
    return Ack()
