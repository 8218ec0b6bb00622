"""SQLAlchemy models for the two kinds of actor: people and their animals."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawprint.db.session import Base
from pawprint.db.time import utcnow


class User(Base):
    """A person with an account.

    Only ``username``, ``full_name`` and ``avatar`` are public; every other
    column is private and is stripped by the feed redaction stage.
    """

    __tablename__ = "user_account"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)

    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    password: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    github_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    guarded_animals: Mapped[list[AnimalGuardian]] = relationship(
        "AnimalGuardian",
        back_populates="guardian",
        cascade="all, delete-orphan",
    )


class Animal(Base):
    """A pet profile that guardians can post, vote and comment for."""

    __tablename__ = "animal"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    guardians: Mapped[list[AnimalGuardian]] = relationship(
        "AnimalGuardian",
        back_populates="animal",
        cascade="all, delete-orphan",
    )


class AnimalGuardian(Base):
    """Grant allowing a user to act on behalf of an animal."""

    __tablename__ = "animal_guardian"

    animal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("animal.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )

    animal: Mapped[Animal] = relationship("Animal", back_populates="guardians")
    guardian: Mapped[User] = relationship("User", back_populates="guarded_animals")
