"""Service-level helpers for creating and deleting posts."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from pawprint.core.errors import Forbidden, Internal, InvalidArgument, NotFound
from pawprint.core.settings import settings
from pawprint.models import ActorKind, Post, User
from pawprint.repositories import PostRepository
from pawprint.schemas.actor import AuthorSummary
from pawprint.schemas.post import CommentData, PostCreated, PostOut, PostView
from pawprint.services.actors import resolve_acting_actor
from pawprint.services.feed import owner_details
from pawprint.services.filters import resolve_filter
from pawprint.services.media import (
    ContentModerator,
    ImageStore,
    ImageUploadError,
    ModerationUnavailable,
    format_image_url,
)

logger = logging.getLogger(__name__)

# A tag starts at a '#' that does not follow a word character or another '#'.
HASHTAG_PATTERN = re.compile(r"(?<![\w#])#(\w+)")
THUMBNAIL_SIZE = 400


@dataclass(frozen=True)
class PostDraft:
    """Everything a client submits to create a post."""

    image: bytes | None
    filename: str = "upload"
    content_type: str | None = None
    caption: str | None = None
    filter_name: str | None = None
    owner_type: ActorKind | None = None
    owner_id: str | None = None


def extract_hashtags(caption: str | None) -> list[str]:
    """Return the caption's hashtags without the marker.

    Case is kept as typed; repeated tags are kept once, in order of first
    appearance.
    """
    if not caption:
        return []
    seen: dict[str, None] = {}
    for match in HASHTAG_PATTERN.finditer(caption):
        seen.setdefault(match.group(1), None)
    return list(seen)


async def create_post(
    *,
    db: Session,
    author: User,
    draft: PostDraft,
    image_store: ImageStore,
    moderator: ContentModerator,
) -> Post:
    """Ingest and moderate the image, then persist the post and its vote shell.

    Nothing is written unless ingestion and moderation both succeed. The
    caller commits.

    Raises:
        InvalidArgument: If the image is missing, too large or not an image.
        Forbidden: If moderation rates the image as explicit.
        Internal: If the image store or moderation service fails.
    """
    if not draft.image:
        raise InvalidArgument("Please provide the image to upload.")
    if len(draft.image) > settings.max_image_bytes:
        limit_mb = settings.max_image_bytes // (1024 * 1024)
        raise InvalidArgument(f"Your file exceeds the limit of {limit_mb}MB.")
    if draft.content_type and not draft.content_type.startswith("image/"):
        raise InvalidArgument("The uploaded file must be an image.")

    owner = None
    if draft.owner_type is not None:
        owner = resolve_acting_actor(
            db, author, draft.owner_type, draft.owner_id, field="postOwnerId"
        )

    try:
        image_url = await image_store.upload(draft.image, draft.filename, draft.content_type)
    except ImageUploadError as exc:
        raise Internal("Could not upload the image, please try again later.") from exc

    try:
        rating = await moderator.rate(image_url)
    except ModerationUnavailable as exc:
        raise Internal("Error moderating image, please try again later.") from exc
    if rating > settings.moderation_max_rating:
        logger.info("Rejected upload from %s with rating %d", author.id, rating)
        raise Forbidden("The content was deemed too explicit to upload.")

    return PostRepository(db).create(
        author_id=author.id,
        image=image_url,
        thumbnail=format_image_url(
            image_url, width=THUMBNAIL_SIZE, height=THUMBNAIL_SIZE, thumbnail=True
        ),
        filter_css=resolve_filter(draft.filter_name),
        caption=draft.caption,
        hashtags=extract_hashtags(draft.caption),
        owner=owner,
    )


def delete_post(db: Session, author: User, post_id: uuid.UUID) -> None:
    """Delete one of the author's posts and everything hanging off it."""
    repo = PostRepository(db)
    post = repo.get_owned(post_id, author.id)
    if post is None:
        raise NotFound("Could not find a post with that id associated with the user.")
    repo.delete(post)


def to_post_out(post: Post) -> PostOut:
    """Convert a Post ORM instance to an API schema."""
    return PostOut(
        id=post.id,
        image=post.image,
        thumbnail=post.thumbnail,
        filter=post.filter,
        caption=post.caption,
        hashtags=post.hashtags,
        post_owner_details=owner_details(post),
        created_at=post.created_at,
        author=post.author_id,
    )


def to_post_created(post: Post, author: User) -> PostCreated:
    """Build the response returned to the author of a new post."""
    return PostCreated(
        post=to_post_out(post),
        author=AuthorSummary(username=author.username, avatar=author.avatar),
    )


def to_fresh_view(post: Post, author: User) -> PostView:
    """Build the view pushed to followers.

    A new post has no votes or comments, so nothing needs joining.
    """
    return PostView(
        id=post.id,
        image=post.image,
        thumbnail=post.thumbnail,
        filter=post.filter,
        caption=post.caption,
        hashtags=post.hashtags,
        post_owner_details=owner_details(post),
        created_at=post.created_at,
        author=AuthorSummary(username=author.username, avatar=author.avatar),
        post_votes=[],
        comment_data=CommentData(comments=[], comment_count=0),
    )
