"""Socket.IO gateway that keeps every authenticated actor in their own room.

A client connects with its access token either as handshake auth
(``io(url, {auth: {token}})``) or as a ``token`` query parameter. The
connection is refused unless the token resolves to an actor. Sending to an
actor with no live connection does nothing; there is no backlog and nothing
is replayed on reconnect.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import socketio

from pawprint.core.errors import Unauthorized
from pawprint.core.security import decode_access_token

logger = logging.getLogger(__name__)

NEW_POST_EVENT = "newPost"

_gateway: FeedNamespace | None = None


def _handshake_token(environ: dict[str, Any], auth: dict[str, Any] | None) -> str | None:
    if auth and auth.get("token"):
        return str(auth["token"])
    scope = environ.get("asgi.scope", {})
    query = environ.get("QUERY_STRING")
    if query is None:
        raw = scope.get("query_string", b"")
        query = raw.decode() if isinstance(raw, bytes) else str(raw)
    tokens = parse_qs(query).get("token")
    return tokens[0] if tokens else None


class FeedNamespace(socketio.AsyncNamespace):
    """Namespace holding one channel per connected actor.

    ``_actors`` maps socket ids to actor ids and ``_channels`` maps actor ids
    to their live socket ids. Both are only touched from the event loop.
    """

    def __init__(
        self,
        namespace: str = "/",
        resolve_identity: Callable[[str], uuid.UUID] = decode_access_token,
    ) -> None:
        super().__init__(namespace)
        self._resolve_identity = resolve_identity
        self._actors: dict[str, str] = {}
        self._channels: dict[str, set[str]] = {}

    @staticmethod
    def channel(actor_id: uuid.UUID | str) -> str:
        return f"actor:{actor_id}"

    async def on_connect(
        self, sid: str, environ: dict[str, Any], auth: dict[str, Any] | None = None
    ) -> None:
        token = _handshake_token(environ, auth)
        if not token:
            raise ConnectionRefusedError("Not authorized.")
        try:
            actor_id = str(self._resolve_identity(token))
        except Unauthorized as exc:
            raise ConnectionRefusedError("Not authorized.") from exc

        self._actors[sid] = actor_id
        self._channels.setdefault(actor_id, set()).add(sid)
        await self.enter_room(sid, self.channel(actor_id))
        logger.info("Socket %s connected for actor %s", sid, actor_id)

    async def on_disconnect(self, sid: str, *args: Any) -> None:
        actor_id = self._actors.pop(sid, None)
        if actor_id is None:
            return
        sids = self._channels.get(actor_id)
        if sids is not None:
            sids.discard(sid)
            if not sids:
                del self._channels[actor_id]
        await self.leave_room(sid, self.channel(actor_id))
        logger.info("Socket %s disconnected for actor %s", sid, actor_id)

    def is_connected(self, actor_id: uuid.UUID | str) -> bool:
        return bool(self._channels.get(str(actor_id)))

    async def send_post(self, actor_id: uuid.UUID | str, payload: dict[str, Any]) -> bool:
        """Push a post to the actor's channel.

        Returns True if a live connection was addressed, False for the
        silent no-op when the actor is offline.
        """
        if not self.is_connected(actor_id):
            return False
        await self.emit(NEW_POST_EVENT, payload, room=self.channel(actor_id))
        return True


def set_gateway(namespace: FeedNamespace | None) -> None:
    global _gateway
    _gateway = namespace


def get_gateway() -> FeedNamespace | None:
    """Return the namespace registered on the running Socket.IO server."""
    return _gateway
