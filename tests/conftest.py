# tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import Callable, Generator, Iterator
from contextlib import nullcontext
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pawprint.core.security import create_access_token
from pawprint.db.session import Base
from pawprint.db.session import get_db as app_get_session
from pawprint.main import app as fastapi_app
from pawprint.models import (
    ActorKind,
    ActorRef,
    Animal,
    AnimalGuardian,
    Comment,
    CommentReply,
    FollowerEntry,
    Followers,
    Following,
    FollowingEntry,
    Post,
    PostVote,
    User,
)
from pawprint.realtime import FeedNamespace
from pawprint.services.fanout import FanoutNotifier, get_fanout_notifier
from pawprint.services.media import (
    ImageUploadError,
    ModerationUnavailable,
    get_content_moderator,
    get_image_store,
)

TEST_DB_URL = "sqlite://"
UPLOADED_IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1700000000/cat.jpg"

_BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN handling for SAVEPOINT to behave.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


# Media collaborators


class FakeImageStore:
    """Image store double that records uploads."""

    def __init__(self) -> None:
        self.uploads: list[tuple[str, int]] = []
        self.fail = False

    async def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        if self.fail:
            raise ImageUploadError("store offline")
        self.uploads.append((filename, len(data)))
        return UPLOADED_IMAGE_URL


class FakeModerator:
    """Moderation double returning a fixed rating."""

    def __init__(self, rating: int = 0) -> None:
        self.rating = rating
        self.unavailable = False
        self.rated: list[str] = []

    async def rate(self, image_url: str) -> int:
        if self.unavailable:
            raise ModerationUnavailable("quota exceeded")
        self.rated.append(image_url)
        return self.rating


@pytest.fixture()
def image_store(app: FastAPI) -> Iterator[FakeImageStore]:
    store = FakeImageStore()
    app.dependency_overrides[get_image_store] = lambda: store
    try:
        yield store
    finally:
        app.dependency_overrides.pop(get_image_store, None)


@pytest.fixture()
def moderator(app: FastAPI) -> Iterator[FakeModerator]:
    fake = FakeModerator()
    app.dependency_overrides[get_content_moderator] = lambda: fake
    try:
        yield fake
    finally:
        app.dependency_overrides.pop(get_content_moderator, None)


# Realtime


@pytest.fixture()
def feed_namespace(mocker) -> FeedNamespace:
    """Namespace with its Socket.IO room and emit calls mocked out."""
    namespace = FeedNamespace()
    mocker.patch.object(namespace, "enter_room", new=AsyncMock())
    mocker.patch.object(namespace, "leave_room", new=AsyncMock())
    mocker.patch.object(namespace, "emit", new=AsyncMock())
    return namespace


@pytest.fixture()
def connect_socket(feed_namespace: FeedNamespace) -> Callable[[User], str]:
    """Open a fake socket for ``user`` and return its sid."""

    def _connect(user: User) -> str:
        sid = f"sid-{user.username}"
        token = create_access_token(user.id)
        asyncio.run(feed_namespace.on_connect(sid, {}, {"token": token}))
        return sid

    return _connect


@pytest.fixture()
def fanout(
    app: FastAPI,
    db_session: Session,
    feed_namespace: FeedNamespace,
) -> Iterator[FanoutNotifier]:
    notifier = FanoutNotifier(
        session_factory=lambda: nullcontext(db_session),
        gateway_provider=lambda: feed_namespace,
    )
    app.dependency_overrides[get_fanout_notifier] = lambda: notifier
    try:
        yield notifier
    finally:
        app.dependency_overrides.pop(get_fanout_notifier, None)


# Factories


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(username: str, **fields: Any) -> User:
        user = User(
            username=username,
            full_name=fields.pop("full_name", username.title()),
            avatar=fields.pop("avatar", f"https://img.test/{username}.png"),
            email=fields.pop("email", f"{username}@example.com"),
            password=fields.pop("password", "$2b$10$hashedpassword"),
            **fields,
        )
        db_session.add(user)
        db_session.flush()
        return user

    return _make


@pytest.fixture()
def make_animal(db_session: Session) -> Callable[..., Animal]:
    def _make(username: str, *guardians: User, **fields: Any) -> Animal:
        animal = Animal(
            username=username,
            name=fields.pop("name", username.title()),
            species=fields.pop("species", "cat"),
            **fields,
        )
        db_session.add(animal)
        db_session.flush()
        for guardian in guardians:
            db_session.add(AnimalGuardian(animal_id=animal.id, user_id=guardian.id))
        db_session.flush()
        return animal

    return _make


@pytest.fixture()
def follow(db_session: Session) -> Callable[..., None]:
    """Record that ``follower`` follows ``followed`` on both sides of the graph."""

    def _follow(follower: User | Animal, followed: User | Animal) -> None:
        follower_ref = _ref(follower)
        followed_ref = _ref(followed)

        following = db_session.get(Following, follower_ref.id)
        if following is None:
            following = Following(actor_id=follower_ref.id, actor_kind=follower_ref.kind)
            db_session.add(following)
        following.entries.append(
            FollowingEntry(followed_kind=followed_ref.kind, followed_id=followed_ref.id)
        )

        followers = db_session.get(Followers, followed_ref.id)
        if followers is None:
            followers = Followers(actor_id=followed_ref.id, actor_kind=followed_ref.kind)
            db_session.add(followers)
        followers.entries.append(
            FollowerEntry(follower_kind=follower_ref.kind, follower_id=follower_ref.id)
        )
        db_session.flush()

    return _follow


@pytest.fixture()
def empty_following(db_session: Session) -> Callable[[User], None]:
    """Give ``user`` a following record with no entries."""

    def _make(user: User) -> None:
        db_session.add(Following(actor_id=user.id, actor_kind=ActorKind.HUMAN))
        db_session.flush()

    return _make


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Create a post ``minutes`` after a fixed base time, with its vote shell."""

    def _make(author: User, minutes: int = 0, caption: str | None = None, **fields: Any) -> Post:
        hashtags = fields.pop("hashtags", [])
        post = Post(
            author_id=author.id,
            image=fields.pop("image", UPLOADED_IMAGE_URL),
            thumbnail=fields.pop("thumbnail", UPLOADED_IMAGE_URL),
            filter=fields.pop("filter", ""),
            caption=caption,
            created_at=_BASE_TIME + timedelta(minutes=minutes),
            **fields,
        )
        post.hashtags = hashtags
        db_session.add(post)
        db_session.flush()
        db_session.add(PostVote(post_id=post.id))
        db_session.flush()
        return post

    return _make


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make(
        post: Post,
        author: User | Animal,
        message: str = "Nice!",
        minutes: int = 0,
    ) -> Comment:
        ref = _ref(author)
        comment = Comment(
            post_id=post.id,
            author_kind=ref.kind,
            author_id=ref.id,
            message=message,
            created_at=_BASE_TIME + timedelta(minutes=minutes),
        )
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make


@pytest.fixture()
def make_reply(db_session: Session) -> Callable[..., CommentReply]:
    def _make(
        comment: Comment,
        author: User | Animal,
        message: str = "Agreed",
        minutes: int = 0,
    ) -> CommentReply:
        ref = _ref(author)
        reply = CommentReply(
            parent_comment_id=comment.id,
            author_kind=ref.kind,
            author_id=ref.id,
            message=message,
            created_at=_BASE_TIME + timedelta(minutes=minutes),
        )
        db_session.add(reply)
        db_session.flush()
        return reply

    return _make


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return authorization headers for ``user``."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture()
def carol(make_user) -> User:
    return make_user("carol")


def _ref(actor: User | Animal) -> ActorRef:
    if isinstance(actor, Animal):
        return ActorRef(ActorKind.ANIMAL, actor.id)
    return ActorRef(ActorKind.HUMAN, actor.id)
