# tests/v1/test_feed.py
"""Tests for the home, suggested and hashtag feeds."""

import uuid

import pytest
from fastapi import status

from pawprint.models import ActorKind, CommentVote, PostVoteEntry


def test_feed_includes_own_and_followed_posts_newest_first(
    client, db_session, alice, bob, carol, follow, make_post, auth_headers
) -> None:
    """The feed is the viewer plus followed actors, ordered by recency."""
    follow(alice, bob)
    oldest = make_post(alice, minutes=1, caption="mine")
    newest = make_post(bob, minutes=3, caption="bob's")
    make_post(carol, minutes=2, caption="stranger")

    response = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice))

    assert response.status_code == status.HTTP_200_OK
    ids = [post["id"] for post in response.json()]
    assert ids == [str(newest.id), str(oldest.id)]


def test_feed_pages_by_offset(client, alice, bob, follow, make_post, auth_headers) -> None:
    follow(alice, bob)
    posts = [make_post(bob, minutes=i) for i in range(7)]
    expected = [str(post.id) for post in reversed(posts)]

    first = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()
    second = client.get("/api/v1/posts/feed/5", headers=auth_headers(alice)).json()

    assert [p["id"] for p in first] == expected[:5]
    assert [p["id"] for p in second] == expected[5:]


def test_feed_without_following_record_is_not_found(client, alice, make_post, auth_headers) -> None:
    make_post(alice)

    response = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Could not find any posts."


def test_feed_with_empty_following_shows_only_own_posts(
    client, alice, bob, empty_following, make_post, auth_headers
) -> None:
    empty_following(alice)
    mine = make_post(alice)
    make_post(bob)

    response = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice))

    assert [p["id"] for p in response.json()] == [str(mine.id)]


def test_feed_requires_token(client) -> None:
    response = client.get("/api/v1/posts/feed/0")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_feed_rejects_garbage_token(client) -> None:
    response = client.get("/api/v1/posts/feed/0", headers={"Authorization": "Bearer nope"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_feed_rejects_negative_offset(client, alice, empty_following, auth_headers) -> None:
    empty_following(alice)
    response = client.get("/api/v1/posts/feed/-1", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_feed_rejects_non_numeric_offset(client, alice, empty_following, auth_headers) -> None:
    empty_following(alice)
    response = client.get("/api/v1/posts/feed/abc", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.parametrize(
    "path",
    [
        "/api/v1/posts/feed/{offset}",
        "/api/v1/posts/suggested/{offset}",
        "/api/v1/posts/hashtag/cats/{offset}",
        "/api/v1/posts/mine/{offset}",
        f"/api/v1/posts/{uuid.uuid4()}/comments/{{offset}}",
        f"/api/v1/comments/{uuid.uuid4()}/replies/{{offset}}",
    ],
)
def test_huge_offset_is_rejected(client, alice, empty_following, auth_headers, path) -> None:
    empty_following(alice)
    url = path.format(offset=99999999999999999999)

    response = client.get(url, headers=auth_headers(alice))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"detail": "Offset must be a non-negative integer."}


def test_feed_redacts_authors(
    client, alice, make_user, follow, make_post, make_comment, auth_headers
) -> None:
    """Only the public projection of an author ever leaves the server."""
    dave = make_user("dave", bio="secret bio", website="https://dave.test", github_id="42")
    follow(alice, dave)
    post = make_post(dave)
    make_comment(post, dave, "first")

    body = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()

    author = body[0]["author"]
    assert set(author) == {"id", "kind", "username", "fullName", "avatar"}
    assert author["username"] == "dave"
    comment_author = body[0]["commentData"]["comments"][0]["author"]
    for private_field in ("email", "password", "bio", "website", "private", "confirmed", "githubId"):
        assert private_field not in author
        assert private_field not in comment_author


@pytest.mark.parametrize(
    ("path", "posts_key"),
    [("/api/v1/posts/suggested/0", None), ("/api/v1/posts/hashtag/secrets/0", "posts")],
)
def test_suggested_and_hashtag_feeds_redact_authors(
    client, alice, make_user, make_post, make_comment, auth_headers, path, posts_key
) -> None:
    dave = make_user("dave", bio="secret bio", website="https://dave.test", github_id="42")
    erin = make_user("erin", bio="hidden", private=True)
    post = make_post(dave, caption="#secrets", hashtags=["secrets"])
    make_comment(post, erin, "psst")

    body = client.get(path, headers=auth_headers(alice)).json()
    posts = body[posts_key] if posts_key else body

    author = posts[0]["author"]
    comment_author = posts[0]["commentData"]["comments"][0]["author"]
    assert set(author) == {"id", "kind", "username", "fullName", "avatar"}
    assert set(comment_author) == {"id", "kind", "username", "fullName", "avatar"}
    assert comment_author["username"] == "erin"


def test_feed_caps_comments_but_counts_all(
    client, alice, bob, follow, make_post, make_comment, auth_headers
) -> None:
    follow(alice, bob)
    post = make_post(bob)
    comments = [make_comment(post, alice, f"comment {i}", minutes=i) for i in range(5)]

    body = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()

    data = body[0]["commentData"]
    assert data["commentCount"] == 5
    assert [c["id"] for c in data["comments"]] == [str(c.id) for c in reversed(comments[2:])]


def test_feed_carries_post_and_comment_voters(
    client, db_session, alice, bob, make_animal, follow, make_post, make_comment, auth_headers
) -> None:
    follow(alice, bob)
    whiskers = make_animal("whiskers", bob)
    post = make_post(bob)
    comment = make_comment(post, whiskers, "meow")
    db_session.add(PostVoteEntry(post_id=post.id, voter_kind=ActorKind.ANIMAL, voter_id=whiskers.id))
    db_session.add(CommentVote(comment_id=comment.id, voter_kind=ActorKind.HUMAN, voter_id=alice.id))
    db_session.flush()

    body = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()

    assert body[0]["postVotes"] == [{"voterType": "Animal", "voterId": str(whiskers.id)}]
    comment_view = body[0]["commentData"]["comments"][0]
    assert comment_view["author"]["kind"] == "Animal"
    assert comment_view["author"]["fullName"] == "Whiskers"
    assert comment_view["commentVotes"] == [{"voterType": "Human", "voterId": str(alice.id)}]


def test_feed_skips_comments_by_missing_authors(
    client, alice, bob, follow, make_post, make_comment, make_animal, db_session, auth_headers
) -> None:
    follow(alice, bob)
    post = make_post(bob)
    ghost = make_animal("ghost", bob)
    make_comment(post, ghost, "boo")
    kept = make_comment(post, alice, "hi", minutes=1)
    db_session.delete(ghost)
    db_session.flush()

    body = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()

    assert [c["id"] for c in body[0]["commentData"]["comments"]] == [str(kept.id)]


def test_post_with_owner_details(client, alice, make_animal, empty_following, make_post, auth_headers) -> None:
    empty_following(alice)
    pet = make_animal("rex", alice)
    make_post(alice, owner_kind=ActorKind.ANIMAL, owner_id=pet.id)

    body = client.get("/api/v1/posts/feed/0", headers=auth_headers(alice)).json()

    assert body[0]["postOwnerDetails"] == {"postOwnerType": "Animal", "postOwnerId": str(pet.id)}


def test_suggested_returns_posts_from_everyone(client, alice, bob, carol, make_post, auth_headers) -> None:
    posts = {str(make_post(author, minutes=i).id) for i, author in enumerate((alice, bob, carol))}

    response = client.get("/api/v1/posts/suggested/0", headers=auth_headers(alice))

    assert response.status_code == status.HTTP_200_OK
    assert {p["id"] for p in response.json()} == posts


def test_suggested_page_is_bounded(client, alice, make_post, auth_headers) -> None:
    for i in range(25):
        make_post(alice, minutes=i)

    first = client.get("/api/v1/posts/suggested/0", headers=auth_headers(alice)).json()
    rest = client.get("/api/v1/posts/suggested/20", headers=auth_headers(alice)).json()

    assert len(first) == 20
    assert len(rest) == 5
    assert not {p["id"] for p in first} & {p["id"] for p in rest}


def test_hashtag_feed_matches_exact_tag(client, alice, bob, make_post, auth_headers) -> None:
    tagged_old = make_post(alice, minutes=1, caption="#cats", hashtags=["cats"])
    tagged_new = make_post(bob, minutes=2, caption="more #cats #dogs", hashtags=["cats", "dogs"])
    make_post(bob, minutes=3, caption="#catsofinstagram", hashtags=["catsofinstagram"])

    response = client.get("/api/v1/posts/hashtag/cats/0", headers=auth_headers(alice))

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["postCount"] == 2
    assert [p["id"] for p in body["posts"]] == [str(tagged_new.id), str(tagged_old.id)]
    assert body["posts"][0]["hashtags"] == ["cats", "dogs"]


def test_hashtag_feed_counts_beyond_page(client, alice, make_post, auth_headers) -> None:
    for i in range(22):
        make_post(alice, minutes=i, hashtags=["sun"])

    body = client.get("/api/v1/posts/hashtag/sun/20", headers=auth_headers(alice)).json()

    assert body["postCount"] == 22
    assert len(body["posts"]) == 2


def test_hashtag_feed_with_no_matches(client, alice, auth_headers) -> None:
    body = client.get("/api/v1/posts/hashtag/nothing/0", headers=auth_headers(alice)).json()
    assert body == {"posts": [], "postCount": 0}


def test_get_single_post_with_comment_page(client, alice, make_post, make_comment) -> None:
    post = make_post(alice, caption="hello")
    for i in range(12):
        make_comment(post, alice, f"c{i}", minutes=i)

    response = client.get(f"/api/v1/posts/{post.id}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["caption"] == "hello"
    assert body["commentData"]["commentCount"] == 12
    assert len(body["commentData"]["comments"]) == 10


def test_get_single_post_not_found(client) -> None:
    response = client.get(f"/api/v1/posts/{uuid.uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_single_post_malformed_id(client) -> None:
    response = client.get("/api/v1/posts/not-a-uuid")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_comment_pages(client, alice, make_post, make_comment) -> None:
    post = make_post(alice)
    comments = [make_comment(post, alice, f"c{i}", minutes=i) for i in range(12)]

    body = client.get(f"/api/v1/posts/{post.id}/comments/10").json()

    assert body["commentCount"] == 12
    assert [c["id"] for c in body["comments"]] == [str(c.id) for c in comments[1::-1]]


def test_my_posts_include_totals(
    client, db_session, alice, bob, make_post, make_comment, auth_headers
) -> None:
    post = make_post(alice)
    make_post(bob)
    make_comment(post, bob)
    make_comment(post, alice)
    db_session.add(PostVoteEntry(post_id=post.id, voter_kind=ActorKind.HUMAN, voter_id=bob.id))
    db_session.flush()

    body = client.get("/api/v1/posts/mine/0", headers=auth_headers(alice)).json()

    assert len(body) == 1
    assert body[0]["id"] == str(post.id)
    assert body[0]["totalVotes"] == 1
    assert body[0]["totalComments"] == 2


def test_filters_are_listed(client) -> None:
    body = client.get("/api/v1/posts/filters").json()
    names = [f["name"] for f in body["filters"]]
    assert names[0] == "Normal"
    assert "Clarendon" in names
