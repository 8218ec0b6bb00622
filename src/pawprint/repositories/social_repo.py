"""Read access to the social graph."""
from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from pawprint.models import ActorRef, Followers, Following

__all__ = ["SocialGraphRepository"]


class SocialGraphRepository:
    """Reads ``Following`` and ``Followers`` records.

    Writes belong to the follow service, which keeps both sides symmetric.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_following(self, actor_id: uuid.UUID) -> Following | None:
        """Return the record of actors ``actor_id`` follows."""
        return self.session.get(Following, actor_id)

    def get_followers(self, actor_id: uuid.UUID) -> Followers | None:
        """Return the record of actors following ``actor_id``."""
        return self.session.get(Followers, actor_id)

    def followers_of(self, actor_id: uuid.UUID) -> list[ActorRef]:
        """Return the followers of ``actor_id``, empty when no record exists."""
        record = self.get_followers(actor_id)
        if record is None:
            return []
        return record.followers
