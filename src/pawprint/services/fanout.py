"""Push new posts to online followers.

Fan-out runs as a background task after the author's response has been
sent. It has its own session and its own error handling: nothing raised
here can reach the request that created the post.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy.orm import Session

from pawprint.db.session import SessionLocal
from pawprint.realtime.gateway import FeedNamespace, get_gateway
from pawprint.repositories import SocialGraphRepository

# Configure logger for this module
logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


class FanoutNotifier:
    """Delivers a freshly created post to every connected follower.

    Delivery is at most once per follower per post. Followers without a live
    connection get nothing.
    """

    def __init__(
        self,
        session_factory: SessionFactory = SessionLocal,
        gateway_provider: Callable[[], FeedNamespace | None] = get_gateway,
    ) -> None:
        self._session_factory = session_factory
        self._gateway_provider = gateway_provider

    async def publish(self, author_id: uuid.UUID, payload: dict[str, Any]) -> int:
        """Send ``payload`` to the author's followers.

        Returns the number of live channels addressed. Never raises.
        """
        try:
            return await self._publish(author_id, payload)
        except Exception:  # background task boundary
            logger.error("Fan-out for author %s failed", author_id, exc_info=True)
            return 0

    async def _publish(self, author_id: uuid.UUID, payload: dict[str, Any]) -> int:
        gateway = self._gateway_provider()
        if gateway is None:
            logger.debug("No realtime gateway registered, skipping fan-out")
            return 0

        with self._session_factory() as db:
            followers = SocialGraphRepository(db).followers_of(author_id)
        if not followers:
            return 0

        # Sends are independent: a slow or broken channel must not hold up the rest.
        results = await asyncio.gather(
            *(gateway.send_post(follower.id, payload) for follower in followers),
            return_exceptions=True,
        )
        delivered = 0
        for follower, result in zip(followers, results):
            if isinstance(result, BaseException):
                logger.warning("Fan-out to %s failed: %s", follower.id, result)
            elif result:
                delivered += 1
        logger.debug(
            "Fanned out post by %s to %d of %d followers", author_id, delivered, len(followers)
        )
        return delivered


_notifier = FanoutNotifier()


def get_fanout_notifier() -> FanoutNotifier:
    """Return the shared fan-out notifier."""
    return _notifier
