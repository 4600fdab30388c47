"""initial tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _id(name: str = "id", **kwargs) -> sa.Column:
    return sa.Column(name, sa.String(length=36), **kwargs)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        _id(primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "video",
        _id(primary_key=True),
        _id("owner_id", sa.ForeignKey("user.id"), nullable=False, index=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=5000), nullable=False),
        sa.Column("media_url", sa.String(length=1024), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=1024), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, index=True),
        *_timestamps(),
    )
    op.create_index("ix_video_created_at", "video", ["created_at"])

    op.create_table(
        "comment",
        _id(primary_key=True),
        _id("owner_id", sa.ForeignKey("user.id"), nullable=False, index=True),
        _id("video_id", nullable=False, index=True),
        sa.Column("content", sa.String(length=1000), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comment_created_at", "comment", ["created_at"])

    op.create_table(
        "tweet",
        _id(primary_key=True),
        _id("owner_id", sa.ForeignKey("user.id"), nullable=False, index=True),
        sa.Column("content", sa.String(length=1000), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_tweet_created_at", "tweet", ["created_at"])

    op.create_table(
        "playlist",
        _id(primary_key=True),
        _id("owner_id", sa.ForeignKey("user.id"), nullable=False, index=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_playlist_created_at", "playlist", ["created_at"])

    op.create_table(
        "playlistitem",
        _id(primary_key=True),
        _id("playlist_id", sa.ForeignKey("playlist.id"), nullable=False, index=True),
        _id("video_id", nullable=False, index=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("playlist_id", "position", name="uq_playlist_position"),
    )

    op.create_table(
        "likes",
        _id(primary_key=True),
        _id("liked_by", sa.ForeignKey("user.id"), nullable=False, index=True),
        _id("video_id", nullable=True, index=True),
        _id("comment_id", nullable=True, index=True),
        _id("tweet_id", nullable=True, index=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, index=True),
        sa.UniqueConstraint("liked_by", "video_id", name="uq_like_video"),
        sa.UniqueConstraint("liked_by", "comment_id", name="uq_like_comment"),
        sa.UniqueConstraint("liked_by", "tweet_id", name="uq_like_tweet"),
    )


def downgrade() -> None:
    for table in ("likes", "playlistitem", "playlist", "tweet", "comment", "video", "user"):
        op.drop_table(table)
