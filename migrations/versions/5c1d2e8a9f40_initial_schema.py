"""initial schema

Revision ID: 5c1d2e8a9f40
Revises:
Create Date: 2026-10-18 09:12:44.310512

"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1d2e8a9f40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _actor_kind() -> sa.String:
    return sa.String(length=16)


def upgrade() -> None:
    """Create accounts, social graph, posts and engagement tables."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("private", sa.Boolean(), nullable=False),
        sa.Column("confirmed", sa.Boolean(), nullable=False),
        sa.Column("github_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "animal",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("species", sa.String(length=50), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "animal_guardian",
        sa.Column("animal_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["animal_id"], ["animal.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("animal_id", "user_id"),
    )

    op.create_table(
        "following",
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("actor_kind", _actor_kind(), nullable=False),
        sa.PrimaryKeyConstraint("actor_id"),
    )
    op.create_table(
        "following_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("followed_kind", _actor_kind(), nullable=False),
        sa.Column("followed_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["actor_id"], ["following.actor_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("actor_id", "followed_kind", "followed_id", name="uq_following_entry"),
    )
    op.create_index("ix_following_entry_actor_id", "following_entry", ["actor_id"])
    op.create_table(
        "followers",
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("actor_kind", _actor_kind(), nullable=False),
        sa.PrimaryKeyConstraint("actor_id"),
    )
    op.create_table(
        "follower_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("follower_kind", _actor_kind(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["actor_id"], ["followers.actor_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("actor_id", "follower_kind", "follower_id", name="uq_follower_entry"),
    )
    op.create_index("ix_follower_entry_actor_id", "follower_entry", ["actor_id"])

    op.create_table(
        "post",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("image", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.Text(), nullable=False),
        sa.Column("filter", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("owner_kind", _actor_kind(), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_created_at", "post", ["created_at"])
    op.create_index("ix_post_author_created", "post", ["author_id", "created_at"])
    op.create_table(
        "post_hashtag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("tag", sa.String(length=100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "tag", name="uq_post_hashtag"),
    )
    op.create_index("ix_post_hashtag_tag", "post_hashtag", ["tag"])
    op.create_table(
        "post_vote",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id"),
    )
    op.create_table(
        "post_vote_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("voter_kind", _actor_kind(), nullable=False),
        sa.Column("voter_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["post_vote.post_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "voter_kind", "voter_id", name="uq_post_vote_entry"),
    )
    op.create_index("ix_post_vote_entry_post_id", "post_vote_entry", ["post_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("author_kind", _actor_kind(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_post_created", "comment", ["post_id", "created_at"])
    op.create_table(
        "comment_vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comment_id", sa.Uuid(), nullable=False),
        sa.Column("voter_kind", _actor_kind(), nullable=False),
        sa.Column("voter_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["comment_id"], ["comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("comment_id", "voter_kind", "voter_id", name="uq_comment_vote"),
    )
    op.create_index("ix_comment_vote_comment_id", "comment_vote", ["comment_id"])
    op.create_table(
        "comment_reply",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("parent_comment_id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("author_kind", _actor_kind(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_comment_reply_parent_created", "comment_reply", ["parent_comment_id", "created_at"]
    )
    op.create_table(
        "comment_reply_vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reply_id", sa.Uuid(), nullable=False),
        sa.Column("voter_kind", _actor_kind(), nullable=False),
        sa.Column("voter_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["reply_id"], ["comment_reply.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("reply_id", "voter_kind", "voter_id", name="uq_comment_reply_vote"),
    )
    op.create_index("ix_comment_reply_vote_reply_id", "comment_reply_vote", ["reply_id"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    op.drop_table("comment_reply_vote")
    op.drop_table("comment_reply")
    op.drop_table("comment_vote")
    op.drop_table("comment")
    op.drop_table("post_vote_entry")
    op.drop_table("post_vote")
    op.drop_table("post_hashtag")
    op.drop_table("post")
    op.drop_table("follower_entry")
    op.drop_table("followers")
    op.drop_table("following_entry")
    op.drop_table("following")
    op.drop_table("animal_guardian")
    op.drop_table("animal")
    op.drop_table("user_account")
