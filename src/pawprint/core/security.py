"""Access token helpers used by the identity resolver.

Token issuance belongs to the account service; the helpers here only cover
what the feed service needs to verify a caller and to mint tokens in tests
and scripts.
"""
from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from pawprint.core.errors import InvalidArgument, Unauthorized
from pawprint.core.settings import settings


def parse_id(value: str | uuid.UUID, field: str = "id") -> uuid.UUID:
    """Parse an opaque identifier, raising ``InvalidArgument`` when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError) as err:
        raise InvalidArgument(f"Malformed {field}.") from err


def create_access_token(subject: uuid.UUID | str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token for the given actor id."""
    to_encode: dict[str, object] = {"id": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> uuid.UUID:
    """Return the actor id carried by ``token``.

    Raises:
        Unauthorized: If the token is malformed, expired or carries no id.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise Unauthorized() from err

    subject = payload.get("id")
    if subject is None:
        raise Unauthorized()
    try:
        return uuid.UUID(str(subject))
    except ValueError as err:
        raise Unauthorized() from err
