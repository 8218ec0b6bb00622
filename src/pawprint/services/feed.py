"""Feed aggregation.

Feeds are assembled by one read-model builder made of named stages:

* **select** picks the post rows for a page,
* **join** batch-loads authors, voters, the newest comments and comment counts,
* **redact** reduces every author to its public projection,
* **project** shapes the joined rows into ``PostView`` objects.

All three feed modes (home, suggested, hashtag) share the join, redact and
project stages and differ only in how rows are selected.

Pagination is offset based. It is not stable under concurrent inserts: a
post written between two page requests shifts later rows by one, so a row
can repeat or be skipped across pages.
"""
from __future__ import annotations

import random
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from pawprint.core.errors import InvalidArgument, NotFound
from pawprint.core.settings import Settings, settings
from pawprint.models import ActorKind, ActorRef, Comment, CommentReply, Post, PostHashtag
from pawprint.repositories import (
    EngagementRepository,
    PostRepository,
    SocialGraphRepository,
    VoteTarget,
)
from pawprint.schemas.actor import PublicAuthor, VoterOut
from pawprint.schemas.post import (
    CommentData,
    CommentView,
    HashtagFeed,
    MyPost,
    PostOwnerDetails,
    PostView,
    ReplyPage,
    ReplyView,
)
from pawprint.services.actors import load_public_actors


@dataclass
class JoinedPage:
    """Rows gathered by the join stage for one page of posts."""

    posts: list[Post]
    actors: dict[ActorRef, PublicAuthor] = field(default_factory=dict)
    post_voters: dict[uuid.UUID, list[ActorRef]] = field(default_factory=dict)
    comments: dict[uuid.UUID, list[Comment]] = field(default_factory=dict)
    comment_voters: dict[uuid.UUID, list[ActorRef]] = field(default_factory=dict)
    comment_counts: dict[uuid.UUID, int] = field(default_factory=dict)


# Largest offset every supported driver accepts in OFFSET.
MAX_OFFSET = 2**31 - 1


def _check_offset(offset: int) -> int:
    if offset < 0 or offset > MAX_OFFSET:
        raise InvalidArgument("Offset must be a non-negative integer.")
    return offset


def owner_details(post: Post) -> PostOwnerDetails | None:
    owner = post.owner
    if owner is None:
        return None
    return PostOwnerDetails(post_owner_type=owner.kind, post_owner_id=owner.id)


class FeedAggregator:
    """Builds ``PostView`` pages for a viewer."""

    def __init__(self, db: Session, config: Settings = settings) -> None:
        self.db = db
        self.config = config
        self.posts = PostRepository(db)
        self.graph = SocialGraphRepository(db)
        self.engagement = EngagementRepository(db)

    # Feed modes

    def get_feed(self, viewer_id: uuid.UUID, offset: int) -> list[PostView]:
        """Return the viewer's home feed page starting at ``offset``.

        Raises:
            NotFound: If the viewer has no following record.
            InvalidArgument: If ``offset`` is negative.
        """
        _check_offset(offset)
        following = self.graph.get_following(viewer_id)
        if following is None:
            raise NotFound("Could not find any posts.")

        visible = {viewer_id} | {ref.id for ref in following.followed}
        posts = self.select_posts(
            Post.author_id.in_(visible),
            offset=offset,
            limit=self.config.feed_page_size,
        )
        return self.build(posts)

    def get_suggested(self, offset: int) -> list[PostView]:
        """Return a shuffled sample of recent posts from the whole network."""
        _check_offset(offset)
        size = self.config.suggested_page_size
        recent = self.select_posts(offset=offset, limit=size)
        sample = random.sample(recent, k=min(size, len(recent)))
        return self.build(sample)

    def get_hashtag(self, hashtag: str, offset: int) -> HashtagFeed:
        """Return posts tagged with exactly ``hashtag`` and the total match count."""
        _check_offset(offset)
        tagged = Post.hashtag_rows.any(PostHashtag.tag == hashtag)
        posts = self.select_posts(tagged, offset=offset, limit=self.config.hashtag_page_size)
        total = self.db.scalar(select(func.count()).select_from(Post).where(tagged)) or 0
        return HashtagFeed(posts=self.build(posts), post_count=total)

    def get_post(self, post_id: uuid.UUID) -> PostView:
        """Return one post with its first page of comments."""
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Could not find a post with that id.")
        views = self.build([post], comment_limit=0)
        if not views:
            raise NotFound("Could not find a post with that id.")
        view = views[0]
        view.comment_data = self.get_comments(post_id, 0)
        return view

    def get_comments(self, post_id: uuid.UUID, offset: int) -> CommentData:
        """Return a page of a post's comments with the total count."""
        _check_offset(offset)
        comments = self.engagement.comments_page(post_id, offset, self.config.comment_page_size)
        actors = load_public_actors(self.db, (c.author_ref for c in comments))
        voters = self.engagement.voters_for(VoteTarget.COMMENT, [c.id for c in comments])
        counts = self.posts.count_comments([post_id])
        return CommentData(
            comments=self.project_comments(comments, actors, voters),
            comment_count=counts.get(post_id, 0),
        )

    def get_replies(self, comment_id: uuid.UUID, offset: int) -> ReplyPage:
        """Return a page of a comment's replies with the total count."""
        _check_offset(offset)
        if self.engagement.get_comment(comment_id) is None:
            raise NotFound("Could not find a comment with that id.")
        replies = self.engagement.replies_page(comment_id, offset, self.config.comment_page_size)
        actors = load_public_actors(self.db, (r.author_ref for r in replies))
        voters = self.engagement.voters_for(VoteTarget.REPLY, [r.id for r in replies])
        return ReplyPage(
            replies=self.project_replies(replies, actors, voters),
            reply_count=self.engagement.count_replies(comment_id),
        )

    def get_own_posts(self, author_id: uuid.UUID, offset: int) -> list[MyPost]:
        """Return the author's posts with vote and comment totals."""
        _check_offset(offset)
        posts = self.posts.list_by_author(author_id, offset, self.config.suggested_page_size)
        ids = [post.id for post in posts]
        votes = self.posts.count_votes(ids)
        comments = self.posts.count_comments(ids)
        return [
            MyPost(
                id=post.id,
                image=post.image,
                thumbnail=post.thumbnail,
                filter=post.filter,
                caption=post.caption,
                hashtags=post.hashtags,
                post_owner_details=owner_details(post),
                created_at=post.created_at,
                author=post.author_id,
                total_votes=votes.get(post.id, 0),
                total_comments=comments.get(post.id, 0),
            )
            for post in posts
        ]

    # Stages

    def select_posts(
        self,
        *criteria: ColumnElement[bool],
        offset: int,
        limit: int,
    ) -> list[Post]:
        """Select stage: newest posts matching ``criteria``."""
        stmt = (
            select(Post)
            .where(*criteria)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def join(self, posts: Sequence[Post], *, comment_limit: int) -> JoinedPage:
        """Join stage: batch-load everything a page of posts refers to."""
        page = JoinedPage(posts=list(posts))
        if not page.posts:
            return page

        post_ids = [post.id for post in page.posts]
        page.post_voters = self.engagement.voters_for(VoteTarget.POST, post_ids)
        page.comments = self.engagement.latest_comments(post_ids, comment_limit)
        page.comment_counts = self.posts.count_comments(post_ids)

        comment_ids = [c.id for batch in page.comments.values() for c in batch]
        page.comment_voters = self.engagement.voters_for(VoteTarget.COMMENT, comment_ids)

        refs: list[ActorRef] = [ActorRef(ActorKind.HUMAN, post.author_id) for post in page.posts]
        refs.extend(c.author_ref for batch in page.comments.values() for c in batch)
        # Redact stage: only public projections are kept past this point.
        page.actors = load_public_actors(self.db, refs)
        return page

    def project(self, page: JoinedPage) -> list[PostView]:
        """Project stage: shape joined rows into ``PostView`` objects.

        Posts or comments whose author no longer exists are dropped.
        """
        views: list[PostView] = []
        for post in page.posts:
            author = page.actors.get(ActorRef(ActorKind.HUMAN, post.author_id))
            if author is None:
                continue
            comments = page.comments.get(post.id, [])
            views.append(
                PostView(
                    id=post.id,
                    image=post.image,
                    thumbnail=post.thumbnail,
                    filter=post.filter,
                    caption=post.caption,
                    hashtags=post.hashtags,
                    post_owner_details=owner_details(post),
                    created_at=post.created_at,
                    author=author,
                    post_votes=_voters_out(page.post_voters.get(post.id, [])),
                    comment_data=CommentData(
                        comments=self.project_comments(
                            comments, page.actors, page.comment_voters
                        ),
                        comment_count=page.comment_counts.get(post.id, 0),
                    ),
                )
            )
        return views

    def project_comments(
        self,
        comments: Iterable[Comment],
        actors: dict[ActorRef, PublicAuthor],
        voters: dict[uuid.UUID, list[ActorRef]],
    ) -> list[CommentView]:
        views: list[CommentView] = []
        for comment in comments:
            author = actors.get(comment.author_ref)
            if author is None:
                continue
            views.append(
                CommentView(
                    id=comment.id,
                    post_id=comment.post_id,
                    message=comment.message,
                    author=author,
                    created_at=comment.created_at,
                    comment_votes=_voters_out(voters.get(comment.id, [])),
                )
            )
        return views

    def project_replies(
        self,
        replies: Iterable[CommentReply],
        actors: dict[ActorRef, PublicAuthor],
        voters: dict[uuid.UUID, list[ActorRef]],
    ) -> list[ReplyView]:
        views: list[ReplyView] = []
        for reply in replies:
            author = actors.get(reply.author_ref)
            if author is None:
                continue
            views.append(
                ReplyView(
                    id=reply.id,
                    parent_comment_id=reply.parent_comment_id,
                    message=reply.message,
                    author=author,
                    created_at=reply.created_at,
                    reply_votes=_voters_out(voters.get(reply.id, [])),
                )
            )
        return views

    def build(self, posts: Sequence[Post], *, comment_limit: int | None = None) -> list[PostView]:
        """Run the join and project stages over selected posts."""
        limit = self.config.feed_comment_preview if comment_limit is None else comment_limit
        return self.project(self.join(posts, comment_limit=limit))


def _voters_out(refs: Iterable[ActorRef]) -> list[VoterOut]:
    return [VoterOut.from_ref(ref) for ref in refs]
