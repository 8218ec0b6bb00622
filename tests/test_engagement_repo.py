# tests/test_engagement_repo.py
"""Tests for vote persistence in EngagementRepository."""

from fastapi import status
from sqlalchemy import func, select

from pawprint.models import ActorKind, ActorRef, Post, PostVote, PostVoteEntry
from pawprint.repositories import EngagementRepository, VoteTarget


IMAGE_URL = "https://img.test/shell.jpg"


def _entries(db_session, post_id) -> int:
    stmt = select(func.count()).select_from(PostVoteEntry).filter_by(post_id=post_id)
    return db_session.scalar(stmt)


def test_add_vote_reports_duplicate_insert(db_session, alice, bob, make_post) -> None:
    """An insert that hits the unique constraint returns False and keeps one row."""
    post = make_post(bob)
    voter = ActorRef(ActorKind.HUMAN, alice.id)
    db_session.add(PostVoteEntry(post_id=post.id, voter_kind=voter.kind, voter_id=voter.id))
    db_session.flush()
    repo = EngagementRepository(db_session)

    assert repo.add_vote(VoteTarget.POST, post.id, voter) is False
    assert _entries(db_session, post.id) == 1
    # The session stays usable after the rolled back savepoint.
    assert repo.find_vote(VoteTarget.POST, post.id, voter) is not None


def test_add_vote_creates_missing_shell(db_session, alice, bob) -> None:
    post = Post(author_id=bob.id, image=IMAGE_URL, thumbnail=IMAGE_URL)
    db_session.add(post)
    db_session.flush()
    assert db_session.get(PostVote, post.id) is None
    repo = EngagementRepository(db_session)

    assert repo.add_vote(VoteTarget.POST, post.id, ActorRef(ActorKind.HUMAN, alice.id)) is True

    assert db_session.get(PostVote, post.id) is not None
    assert _entries(db_session, post.id) == 1


def test_vote_losing_insert_race_still_succeeds(
    client, db_session, mocker, alice, bob, make_post, auth_headers
) -> None:
    """A vote that lands between the existence check and the insert is a success."""
    post = make_post(bob)
    db_session.add(PostVoteEntry(post_id=post.id, voter_kind=ActorKind.HUMAN, voter_id=alice.id))
    db_session.flush()
    mocker.patch.object(EngagementRepository, "find_vote", return_value=None)

    response = client.post(
        f"/api/v1/posts/{post.id}/vote",
        json={"vote": True},
        headers=auth_headers(alice),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert _entries(db_session, post.id) == 1
