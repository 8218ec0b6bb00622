# src/pawprint/models/__init__.py
"""SQLAlchemy models for the Pawprint application."""

from .actor import ActorKind, ActorRef
from .comment import Comment, CommentReply
from .post import Post, PostHashtag
from .social import FollowerEntry, Followers, Following, FollowingEntry
from .user import Animal, AnimalGuardian, User
from .vote import CommentReplyVote, CommentVote, PostVote, PostVoteEntry

__all__ = [
    "ActorKind", "ActorRef",
    "Animal", "AnimalGuardian", "User",
    "Comment", "CommentReply",
    "Followers", "FollowerEntry", "Following", "FollowingEntry",
    "Post", "PostHashtag",
    "CommentReplyVote", "CommentVote", "PostVote", "PostVoteEntry",
]
