"""Image ingestion and content moderation adapters.

Both collaborators are external services. The protocols below are what the
post service depends on; the ``Http*`` classes are the default adapters and
tests replace them through FastAPI dependency overrides.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

from pawprint.core.settings import Settings, settings

# Configure logger for this module
logger = logging.getLogger(__name__)

UPLOAD_SEGMENT = "/upload/"


class MediaError(RuntimeError):
    """Base exception raised for media collaborator failures."""


class ImageUploadError(MediaError):
    """Raised when the image store rejects or fails an upload."""


class ModerationUnavailable(MediaError):
    """Raised when the moderation service cannot rate an image."""


class ImageStore(Protocol):
    async def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        """Store ``data`` and return its public https url."""
        ...


class ContentModerator(Protocol):
    async def rate(self, image_url: str) -> int:
        """Return the explicitness rating index for the image at ``image_url``."""
        ...


class _HttpAdapter:
    """Owns a lazily created ``httpx.AsyncClient``."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.config.external_http_timeout_seconds),
                )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class HttpImageStore(_HttpAdapter):
    """Uploads images to an unsigned-upload endpoint (Cloudinary style)."""

    async def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        if not self.config.image_upload_url:
            raise ImageUploadError("Image uploads are not configured")

        client = await self._ensure_client()
        form: dict[str, str] = {}
        if self.config.image_upload_preset:
            form["upload_preset"] = self.config.image_upload_preset
        try:
            response = await client.post(
                self.config.image_upload_url,
                data=form,
                files={"file": (filename, data, content_type or "application/octet-stream")},
            )
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Image upload failed: %s", exc)
            raise ImageUploadError("Image upload failed") from exc

        secure_url = payload.get("secure_url")
        if not secure_url:
            raise ImageUploadError("Image store returned no url")
        return str(secure_url)


class HttpContentModerator(_HttpAdapter):
    """Rates images with a moderatecontent.com compatible API."""

    async def rate(self, image_url: str) -> int:
        client = await self._ensure_client()
        try:
            response = await client.get(
                self.config.moderation_api_url,
                params={"key": self.config.moderation_api_key or "", "url": image_url},
            )
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Moderation request failed: %s", exc)
            raise ModerationUnavailable("Moderation request failed") from exc

        if payload.get("error"):
            logger.warning("Moderation service error: %s", payload["error"])
            raise ModerationUnavailable(str(payload["error"]))
        try:
            return int(payload["rating_index"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ModerationUnavailable("Moderation response had no rating") from exc


def format_image_url(url: str, *, width: int, height: int, thumbnail: bool = False) -> str:
    """Insert a resize transformation into an image store url.

    ``https://host/image/upload/v1/cat.jpg`` becomes
    ``https://host/image/upload/w_400,h_400,c_thumb/v1/cat.jpg``. Urls without
    an upload segment are returned unchanged.
    """
    head, sep, tail = url.partition(UPLOAD_SEGMENT)
    if not sep:
        return url
    transformation = f"w_{width},h_{height}"
    if thumbnail:
        transformation += ",c_thumb"
    return f"{head}{sep}{transformation}/{tail}"


class _MediaSingleton:
    """Process-wide default adapters."""

    image_store: HttpImageStore | None = None
    moderator: HttpContentModerator | None = None


def get_image_store() -> ImageStore:
    """Return the shared image store adapter."""
    if _MediaSingleton.image_store is None:
        _MediaSingleton.image_store = HttpImageStore()
    return _MediaSingleton.image_store


def get_content_moderator() -> ContentModerator:
    """Return the shared moderation adapter."""
    if _MediaSingleton.moderator is None:
        _MediaSingleton.moderator = HttpContentModerator()
    return _MediaSingleton.moderator


async def close_media_clients() -> None:
    """Close any HTTP clients opened by the default adapters."""
    for adapter in (_MediaSingleton.image_store, _MediaSingleton.moderator):
        if adapter is not None:
            await adapter.close()
