"""Post and feed Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from pawprint.models.actor import ActorKind

from .actor import AuthorSummary, PublicAuthor, VoterOut
from .common import CamelModel


class PostOwnerDetails(CamelModel):
    """Actor a post was published on behalf of."""

    post_owner_type: ActorKind
    post_owner_id: uuid.UUID


class PostFields(CamelModel):
    """Columns shared by every post representation."""

    id: uuid.UUID
    image: str
    thumbnail: str
    filter: str = ""
    caption: str | None = None
    hashtags: list[str] = Field(default_factory=list)
    post_owner_details: PostOwnerDetails | None = None
    created_at: datetime


class PostOut(PostFields):
    """A stored post with its author as a bare id."""

    author: uuid.UUID


class CommentView(CamelModel):
    """A comment with its redacted author and its voters."""

    id: uuid.UUID
    post_id: uuid.UUID
    message: str
    author: PublicAuthor
    created_at: datetime
    comment_votes: list[VoterOut] = Field(default_factory=list)


class CommentData(CamelModel):
    """Slice of a post's comments plus the uncapped total."""

    comments: list[CommentView] = Field(default_factory=list)
    comment_count: int = 0


class ReplyView(CamelModel):
    """A comment reply with its redacted author and its voters."""

    id: uuid.UUID
    parent_comment_id: uuid.UUID
    message: str
    author: PublicAuthor
    created_at: datetime
    reply_votes: list[VoterOut] = Field(default_factory=list)


class ReplyPage(CamelModel):
    """Page of replies plus the uncapped total."""

    replies: list[ReplyView] = Field(default_factory=list)
    reply_count: int = 0


class PostView(PostFields):
    """Denormalised read model served by every feed."""

    author: PublicAuthor | AuthorSummary
    post_votes: list[VoterOut] = Field(default_factory=list)
    comment_data: CommentData = Field(default_factory=CommentData)


class HashtagFeed(CamelModel):
    """Hashtag feed page with the total number of matching posts."""

    posts: list[PostView] = Field(default_factory=list)
    post_count: int = 0


class PostCreated(CamelModel):
    """Response body returned to the author of a new post."""

    post: PostOut
    post_votes: list[VoterOut] = Field(default_factory=list)
    comments: list[CommentView] = Field(default_factory=list)
    author: AuthorSummary


class MyPost(PostOut):
    """One of the caller's own posts with engagement totals."""

    total_votes: int = 0
    total_comments: int = 0


class FilterOut(CamelModel):
    """A named image filter preset."""

    name: str
    filter: str


class FilterList(CamelModel):
    filters: list[FilterOut]
