"""Actor resolution and redaction.

Every ``ActorRef`` lookup branches on its kind: humans live in
``user_account`` and animals in ``animal``. Every author that leaves the
server passes through :func:`redact`.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from pawprint.core.errors import Forbidden, InvalidArgument, NotFound
from pawprint.core.security import parse_id
from pawprint.models import ActorKind, ActorRef, Animal, AnimalGuardian, User
from pawprint.schemas.actor import PublicAuthor


def redact(actor: User | Animal) -> PublicAuthor:
    """Project an actor record onto its public fields."""
    if isinstance(actor, User):
        return PublicAuthor(
            id=actor.id,
            kind=ActorKind.HUMAN,
            username=actor.username,
            full_name=actor.full_name,
            avatar=actor.avatar,
        )
    return PublicAuthor(
        id=actor.id,
        kind=ActorKind.ANIMAL,
        username=actor.username,
        full_name=actor.name,
        avatar=actor.avatar,
    )


def load_public_actors(db: Session, refs: Iterable[ActorRef]) -> dict[ActorRef, PublicAuthor]:
    """Fetch and redact every referenced actor.

    Missing actors are absent from the result; callers drop rows whose
    author no longer exists.
    """
    human_ids: set[uuid.UUID] = set()
    animal_ids: set[uuid.UUID] = set()
    for ref in refs:
        if ref.kind is ActorKind.HUMAN:
            human_ids.add(ref.id)
        elif ref.kind is ActorKind.ANIMAL:
            animal_ids.add(ref.id)

    found: dict[ActorRef, PublicAuthor] = {}
    if human_ids:
        for user in db.scalars(select(User).where(User.id.in_(human_ids))):
            found[ActorRef(ActorKind.HUMAN, user.id)] = redact(user)
    if animal_ids:
        for animal in db.scalars(select(Animal).where(Animal.id.in_(animal_ids))):
            found[ActorRef(ActorKind.ANIMAL, animal.id)] = redact(animal)
    return found


def is_guardian(db: Session, user_id: uuid.UUID, animal_id: uuid.UUID) -> bool:
    """Return True if ``user_id`` may act for ``animal_id``."""
    grant = db.get(AnimalGuardian, {"animal_id": animal_id, "user_id": user_id})
    return grant is not None


def can_act_as(db: Session, user: User, ref: ActorRef) -> bool:
    """Return True if ``user`` is ``ref`` or guards the animal ``ref`` names."""
    if ref.kind is ActorKind.HUMAN:
        return ref.id == user.id
    return is_guardian(db, user.id, ref.id)


def resolve_acting_actor(
    db: Session,
    user: User,
    kind: ActorKind,
    raw_id: str | None,
    *,
    field: str = "actor id",
) -> ActorRef:
    """Resolve who ``user`` is acting as.

    Humans always act as themselves, whatever id the client sent. Animals
    must exist and be guarded by ``user``.

    Raises:
        InvalidArgument: If an animal is named without a well-formed id.
        NotFound: If the animal does not exist.
        Forbidden: If ``user`` is not one of the animal's guardians.
    """
    if kind is ActorKind.HUMAN:
        return ActorRef(ActorKind.HUMAN, user.id)

    if not raw_id:
        raise InvalidArgument(f"Missing {field}.")
    animal_id = parse_id(raw_id, field)
    if db.get(Animal, animal_id) is None:
        raise NotFound("Could not find that animal.")
    if not is_guardian(db, user.id, animal_id):
        raise Forbidden("You are not a guardian of that animal.")
    return ActorRef(ActorKind.ANIMAL, animal_id)
