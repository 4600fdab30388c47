import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy import func
from sqlmodel import Session, select

from videotube.auth.utils import get_current_user
from videotube.db.models import Playlist, PlaylistItem, User, Video
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import InvalidArgument, NotFound, StoreError
from videotube.ownership import OwnedResource
from videotube.responses import api_response
from videotube.utils import is_blank, parse_id

# Set up logging
logger = logging.getLogger("playlists")

router = APIRouter(tags=["playlists"])

APPEND_ATTEMPTS = 5


class PlaylistBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


def _require_fields(payload: PlaylistBody) -> dict:
    if is_blank(payload.name) or is_blank(payload.description):
        raise InvalidArgument("All fields are required i.e name and description")
    return {"name": payload.name.strip(), "description": payload.description.strip()}


def _playlists(db_session: Session) -> OwnedResource[Playlist]:
    return OwnedResource(ResourceStore(db_session, Playlist), "playlist")


def _video_ids(db_session: Session, playlist_id: str) -> list[str]:
    items = ResourceStore(db_session, PlaylistItem).find(
        PlaylistItem.playlist_id == playlist_id,
        order_by=PlaylistItem.position,
    )
    return [item.video_id for item in items]


def _playlist_data(db_session: Session, playlist: Playlist) -> dict:
    return {**playlist.model_dump(), "videos": _video_ids(db_session, playlist.id)}


def append_video(db_session: Session, playlist_id: str, video_id: str) -> PlaylistItem:
    """Append to the end of the sequence; the same video may be added again.

    (playlist_id, position) is unique, so a concurrent append that took the
    same slot makes this insert fail and the next attempt reads a fresh end.
    """
    items = ResourceStore(db_session, PlaylistItem)
    for _ in range(APPEND_ATTEMPTS):
        last_position = db_session.exec(
            select(func.max(PlaylistItem.position)).where(PlaylistItem.playlist_id == playlist_id)
        ).first()
        position = (last_position or 0) + 1
        item = items.insert_if_absent(playlist_id=playlist_id, video_id=video_id, position=position)
        if item is not None:
            return item
        logger.warning(f"Position {position} of playlist {playlist_id} was taken, retrying")
    raise StoreError("Could not append video to playlist.")


def pull_video(db_session: Session, playlist_id: str, video_id: str) -> int:
    """Remove every occurrence of the video; returns how many were removed."""
    return ResourceStore(db_session, PlaylistItem).delete_where(
        PlaylistItem.playlist_id == playlist_id,
        PlaylistItem.video_id == video_id,
    )


@router.post("/")
def create_playlist(
    payload: PlaylistBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    playlist = ResourceStore(db_session, Playlist).create(
        owner_id=current_user.id,
        **_require_fields(payload),
    )
    logger.info(f"User {current_user.id} created playlist {playlist.id}")
    return api_response(
        status.HTTP_201_CREATED,
        {**playlist.model_dump(), "videos": []},
        "Playlist is created successfully",
    )


@router.get("/user/{userId}")
def get_user_playlists(
    userId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    user_id = parse_id(userId, "user")
    playlists = ResourceStore(db_session, Playlist).find(Playlist.owner_id == user_id)
    return api_response(
        status.HTTP_200_OK,
        [_playlist_data(db_session, playlist) for playlist in playlists],
        "User playlists are fetched successfully",
    )


@router.get("/{playlistId}")
def get_playlist_by_id(
    playlistId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    playlist = _playlists(db_session).get_or_404(parse_id(playlistId, "playlist"))
    return api_response(status.HTTP_200_OK, _playlist_data(db_session, playlist), "Playlist is fetched successfully")


@router.patch("/{playlistId}")
def update_playlist(
    playlistId: str,
    payload: PlaylistBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    playlist_id = parse_id(playlistId, "playlist")
    fields = _require_fields(payload)

    updated = _playlists(db_session).update_owned(playlist_id, current_user.id, fields)
    logger.info(f"User {current_user.id} updated playlist {playlist_id}")
    return api_response(status.HTTP_200_OK, _playlist_data(db_session, updated), "Playlist is updated successfully")


@router.delete("/{playlistId}")
def delete_playlist(
    playlistId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a playlist and all its items.
    """
    playlist_id = parse_id(playlistId, "playlist")
    playlists = _playlists(db_session)
    playlists.get_owned(playlist_id, current_user.id, "delete")

    # Delete playlist items first (due to foreign key constraint)
    ResourceStore(db_session, PlaylistItem).delete_where(PlaylistItem.playlist_id == playlist_id)
    playlists.store.delete(playlist_id)

    logger.info(f"User {current_user.id} deleted playlist {playlist_id}")
    return api_response(status.HTTP_200_OK, {}, "Playlist is deleted successfully")


@router.patch("/add/{videoId}/{playlistId}")
def add_video_to_playlist(
    videoId: str,
    playlistId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    playlist_id = parse_id(playlistId, "playlist")
    video_id = parse_id(videoId, "video")

    playlists = _playlists(db_session)
    playlist = playlists.get_owned(playlist_id, current_user.id, "add videos to")
    if not ResourceStore(db_session, Video).exists(Video.id == video_id):
        raise NotFound("Video not found.")

    append_video(db_session, playlist_id, video_id)
    playlists.store.update(playlist_id, {})

    logger.info(f"User {current_user.id} added video {video_id} to playlist {playlist_id}")
    return api_response(
        status.HTTP_200_OK,
        _playlist_data(db_session, playlist),
        "Video is added to playlist successfully",
    )


@router.patch("/remove/{videoId}/{playlistId}")
def remove_video_from_playlist(
    videoId: str,
    playlistId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    playlist_id = parse_id(playlistId, "playlist")
    video_id = parse_id(videoId, "video")

    playlists = _playlists(db_session)
    playlist = playlists.get_owned(playlist_id, current_user.id, "remove videos from")

    removed = pull_video(db_session, playlist_id, video_id)
    playlists.store.update(playlist_id, {})

    logger.info(f"User {current_user.id} removed {removed} entries of video {video_id} from playlist {playlist_id}")
    return api_response(
        status.HTTP_200_OK,
        _playlist_data(db_session, playlist),
        "Video is removed from playlist successfully",
    )
