"""Vote and comment request schemas."""

from pydantic import Field

from .actor import AuthorDetails, VoterDetails
from .common import CamelModel


class VoteRequest(CamelModel):
    """Toggle a vote on a post, comment or reply."""

    voter_details: VoterDetails = Field(default_factory=VoterDetails)
    vote: bool = Field(..., description="True to vote, False to remove the vote")


class CommentCreate(CamelModel):
    """Schema for commenting on a post."""

    post_id: str
    message: str = Field(..., min_length=1, max_length=2200)
    author_details: AuthorDetails = Field(default_factory=AuthorDetails)


class ReplyCreate(CamelModel):
    """Schema for replying to a comment."""

    message: str = Field(..., min_length=1, max_length=2200)
    author_details: AuthorDetails = Field(default_factory=AuthorDetails)


class MessageEdit(CamelModel):
    """Schema for editing a comment or reply."""

    message: str = Field(..., min_length=1, max_length=2200)
