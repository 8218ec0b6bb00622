"""Data access layer for posts, the social graph and engagement rows."""

from .engagement_repo import EngagementRepository, VoteTarget
from .post_repo import PostRepository
from .social_repo import SocialGraphRepository

__all__ = ["EngagementRepository", "PostRepository", "SocialGraphRepository", "VoteTarget"]
