"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .actor import AuthorDetails, AuthorSummary, PublicAuthor, VoterDetails, VoterOut
from .common import Ack
from .engagement import CommentCreate, MessageEdit, ReplyCreate, VoteRequest
from .post import (
    CommentData,
    CommentView,
    FilterList,
    HashtagFeed,
    MyPost,
    PostCreated,
    PostOut,
    PostView,
    ReplyPage,
    ReplyView,
)

__all__ = [
    "Ack",
    "AuthorDetails", "AuthorSummary", "PublicAuthor", "VoterDetails", "VoterOut",
    "CommentCreate", "MessageEdit", "ReplyCreate", "VoteRequest",
    "CommentData", "CommentView", "FilterList", "HashtagFeed", "MyPost",
    "PostCreated", "PostOut", "PostView", "ReplyPage", "ReplyView",
]
