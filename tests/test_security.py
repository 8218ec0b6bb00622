# tests/test_security.py
"""Tests for token and identifier helpers."""

import uuid

import pytest
from jose import jwt

from pawprint.core.errors import InvalidArgument, Unauthorized
from pawprint.core.security import create_access_token, decode_access_token, parse_id
from pawprint.core.settings import settings


def test_token_round_trip() -> None:
    actor_id = uuid.uuid4()
    assert decode_access_token(create_access_token(actor_id)) == actor_id


def test_token_signed_with_other_key_is_rejected() -> None:
    token = jwt.encode({"id": str(uuid.uuid4())}, "not-the-key", algorithm="HS256")
    with pytest.raises(Unauthorized):
        decode_access_token(token)


def test_token_without_id_is_rejected() -> None:
    token = jwt.encode({"sub": "someone"}, settings.secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(Unauthorized):
        decode_access_token(token)


def test_parse_id_rejects_malformed_values() -> None:
    with pytest.raises(InvalidArgument, match="Malformed postId."):
        parse_id("42", "postId")


def test_parse_id_accepts_uuid_strings() -> None:
    value = uuid.uuid4()
    assert parse_id(str(value)) == value
