from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from videotube.utils import generate_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_now)


class Video(SQLModel, table=True):
    """A published video. Media and thumbnail live on the media host."""
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    title: str = Field(max_length=255)
    description: str = Field(default="", max_length=5000)
    media_url: str = Field(max_length=1024)
    thumbnail_url: str = Field(max_length=1024)
    duration: float = Field(default=0)  # seconds, as reported by the media host
    is_published: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Comment(SQLModel, table=True):
    """Stores comments on videos."""
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    video_id: str = Field(index=True, max_length=36)
    content: str = Field(max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Tweet(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    content: str = Field(max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Playlist(SQLModel, table=True):
    """User-created playlists for organizing videos."""
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    owner_id: str = Field(foreign_key="user.id", index=True, max_length=36)
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class PlaylistItem(SQLModel, table=True):
    """One entry of a playlist's video sequence. The same video may appear more than once."""
    __table_args__ = (UniqueConstraint("playlist_id", "position", name="uq_playlist_position"),)

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    playlist_id: str = Field(foreign_key="playlist.id", index=True, max_length=36)
    video_id: str = Field(index=True, max_length=36)
    position: int = Field(default=0)  # For ordering items in playlist
    created_at: datetime = Field(default_factory=utc_now)


class Like(SQLModel, table=True):
    """A user's like on exactly one of video, comment or tweet."""
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by", "video_id", name="uq_like_video"),
        UniqueConstraint("liked_by", "comment_id", name="uq_like_comment"),
        UniqueConstraint("liked_by", "tweet_id", name="uq_like_tweet"),
    )

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=36)
    liked_by: str = Field(foreign_key="user.id", index=True, max_length=36)
    video_id: Optional[str] = Field(default=None, index=True, max_length=36)
    comment_id: Optional[str] = Field(default=None, index=True, max_length=36)
    tweet_id: Optional[str] = Field(default=None, index=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, index=True)
