# src/pawprint/api/v1/endpoints/posts.py
"""Post and feed endpoints for the Pawprint API."""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile, status

from pawprint.core.security import parse_id
from pawprint.models import ActorKind
from pawprint.repositories import VoteTarget
from pawprint.schemas import (
    Ack,
    CommentData,
    FilterList,
    HashtagFeed,
    MyPost,
    PostCreated,
    PostView,
    VoteRequest,
)
from pawprint.services import engagement, post_service
from pawprint.services.feed import FeedAggregator
from pawprint.services.filters import list_filters

from ..dependencies import (
    CurrentUserDep,
    FanoutDep,
    ImageStoreDep,
    ModeratorDep,
    SessionDep,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/feed/{offset}", response_model=list[PostView])
async def get_feed(offset: int, current_user: CurrentUserDep, db: SessionDep) -> list[PostView]:
    """Return a page of posts by the caller and the actors they follow.

    Raises:
        NotFound: If the caller has no following record.
    """
    return FeedAggregator(db).get_feed(current_user.id, offset)


@router.get("/suggested/{offset}", response_model=list[PostView])
async def get_suggested(
    offset: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[PostView]:
    """Return a shuffled sample of recent posts from across the network."""
    return FeedAggregator(db).get_suggested(offset)


@router.get("/hashtag/{hashtag}/{offset}", response_model=HashtagFeed)
async def get_hashtag_posts(
    hashtag: str,
    offset: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> HashtagFeed:
    """Return posts carrying ``hashtag`` along with the total match count."""
    return FeedAggregator(db).get_hashtag(hashtag, offset)


@router.get("/mine/{offset}", response_model=list[MyPost])
async def get_my_posts(offset: int, current_user: CurrentUserDep, db: SessionDep) -> list[MyPost]:
    """Return the caller's own posts with vote and comment totals."""
    return FeedAggregator(db).get_own_posts(current_user.id, offset)


@router.get("/filters", response_model=FilterList)
async def get_filters() -> FilterList:
    """List the image filter presets."""
    return FilterList.model_validate({"filters": list_filters()})


@router.get("/{post_id}", response_model=PostView)
async def get_post(post_id: str, db: SessionDep) -> PostView:
    """Return a single post with its first page of comments."""
    return FeedAggregator(db).get_post(parse_id(post_id, "postId"))


@router.get("/{post_id}/comments/{offset}", response_model=CommentData)
async def get_post_comments(post_id: str, offset: int, db: SessionDep) -> CommentData:
    """Return a page of comments on a post."""
    return FeedAggregator(db).get_comments(parse_id(post_id, "postId"), offset)


@router.post("", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
async def create_post(
    current_user: CurrentUserDep,
    db: SessionDep,
    image_store: ImageStoreDep,
    moderator: ModeratorDep,
    notifier: FanoutDep,
    background_tasks: BackgroundTasks,
    image: Annotated[UploadFile | None, File()] = None,
    caption: Annotated[str | None, Form(max_length=2200)] = None,
    filter_name: Annotated[str | None, Form(alias="filter")] = None,
    post_owner_id: Annotated[str | None, Form(alias="postOwnerId")] = None,
    post_owner_type: Annotated[ActorKind | None, Form(alias="postOwnerType")] = None,
) -> PostCreated:
    """Create a post from an uploaded image.

    The post and its vote shell are committed before the response is
    returned. Followers are notified afterwards by a background task whose
    failures never reach this response.

    Raises:
        InvalidArgument: If no usable image was uploaded.
        Forbidden: If moderation rejects the image.
    """
    draft = post_service.PostDraft(
        image=await image.read() if image is not None else None,
        filename=(image.filename if image is not None else None) or "upload",
        content_type=image.content_type if image is not None else None,
        caption=caption,
        filter_name=filter_name,
        owner_type=post_owner_type,
        owner_id=post_owner_id,
    )
    post = await post_service.create_post(
        db=db,
        author=current_user,
        draft=draft,
        image_store=image_store,
        moderator=moderator,
    )
    db.commit()
    db.refresh(post)

    payload = post_service.to_fresh_view(post, current_user).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(notifier.publish, current_user.id, payload)
    logger.info("Post %s created by %s", post.id, current_user.id)
    return post_service.to_post_created(post, current_user)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> None:
    """Delete one of the caller's posts together with its votes and comments.

    Raises:
        NotFound: If the caller has no post with that id.
    """
    post_service.delete_post(db, current_user, parse_id(post_id, "postId"))
    db.commit()


@router.post("/{post_id}/vote", response_model=Ack)
async def vote_post(
    post_id: str,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Ack:
    """Add or remove a vote on a post. Repeating either is a no-op."""
    engagement.toggle_vote(
        db,
        current_user,
        VoteTarget.POST,
        parse_id(post_id, "postId"),
        payload.voter_details,
        payload.vote,
    )
    db.commit()
    return Ack()
