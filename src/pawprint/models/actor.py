"""Actor kinds shared by every polymorphic author and voter reference."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped, mapped_column


class ActorKind(str, Enum):
    """Discriminator for the two kinds of actor in the network."""

    HUMAN = "Human"
    ANIMAL = "Animal"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def actor_kind_column() -> SAEnum:
    """Return the column type used to persist an ``ActorKind``."""
    return SAEnum(
        ActorKind,
        name="actor_kind",
        native_enum=False,
        length=16,
        values_callable=_enum_values,
    )


@dataclass(frozen=True)
class ActorRef:
    """Tagged reference to an actor: ``{kind, id}``."""

    kind: ActorKind
    id: uuid.UUID


class VoterMixin:
    """Columns identifying who cast a vote."""

    voter_kind: Mapped[ActorKind] = mapped_column(actor_kind_column(), nullable=False)
    voter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    @property
    def voter(self) -> ActorRef:
        """Return the voter as an ``ActorRef``."""
        return ActorRef(self.voter_kind, self.voter_id)


class AuthoredMixin:
    """Columns identifying the author of a comment or reply."""

    author_kind: Mapped[ActorKind] = mapped_column(actor_kind_column(), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    @property
    def author_ref(self) -> ActorRef:
        """Return the author as an ``ActorRef``."""
        return ActorRef(self.author_kind, self.author_id)
