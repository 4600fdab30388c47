import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import or_
from sqlmodel import Session

from videotube.auth.utils import get_current_user
from videotube.db.models import User, Video
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import InvalidArgument
from videotube.media.host import MediaHost, get_media_host
from videotube.media.lifecycle import MediaLifecycleManager
from videotube.media.uploads import stage_upload
from videotube.ownership import OwnedResource, is_owner
from videotube.pagination import paginate, parse_page_params
from videotube.responses import api_response
from videotube.utils import escape_like, is_blank, parse_id

from .models import VideoUpdate

logger = logging.getLogger("videos")

router = APIRouter(tags=["videos"])

SORT_COLUMNS = {
    "createdAt": Video.created_at,
    "title": Video.title,
    "duration": Video.duration,
}


def _videos(db_session: Session) -> OwnedResource[Video]:
    return OwnedResource(ResourceStore(db_session, Video), "video")


@router.get("/")
def get_all_videos(
    page: str = "1",
    limit: str = "10",
    query: Optional[str] = None,
    sortBy: str = "createdAt",
    sortType: str = "desc",
    userId: Optional[str] = None,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    List videos, newest first unless sortBy/sortType say otherwise.
    - Unpublished videos are only listed for their owner (userId = requester).
    - query matches title or description, case-insensitively.
    """
    page_number, limit_number = parse_page_params(page, limit)

    column = SORT_COLUMNS.get(sortBy)
    if column is None:
        raise InvalidArgument(f"sortBy must be one of: {', '.join(SORT_COLUMNS)}.")
    if sortType not in ("asc", "desc"):
        raise InvalidArgument("sortType must be asc or desc.")

    filters = []
    owner_id = parse_id(userId, "user") if userId else None
    if owner_id:
        filters.append(Video.owner_id == owner_id)
    if not is_owner(owner_id, current_user.id):
        filters.append(Video.is_published == True)  # noqa: E712
    if query and query.strip():
        pattern = f"%{escape_like(query.strip())}%"
        filters.append(
            or_(Video.title.ilike(pattern, escape="\\"), Video.description.ilike(pattern, escape="\\"))
        )

    store = ResourceStore(db_session, Video)
    total = store.count(*filters)
    window = paginate(page_number, limit_number, total)
    videos = store.find(
        *filters,
        order_by=column.asc() if sortType == "asc" else column.desc(),
        skip=window.skip,
        limit=window.limit,
    )
    logger.info(f"Retrieved {len(videos)} videos for user {current_user.id}")
    return api_response(
        status.HTTP_200_OK,
        {"videos": videos, "count": total, "pagination": window.pagination()},
        "Videos are fetched successfully",
    )


@router.post("/")
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    media_host: MediaHost = Depends(get_media_host),
):
    """
    Publish a video (multipart: title, description, videoFile, thumbnail).
    The record is only created once both files are on the media host.
    """
    if is_blank(title) or is_blank(description):
        raise InvalidArgument("All fields are required i.e. title and description.")

    manager = MediaLifecycleManager(media_host, ResourceStore(db_session, Video))
    video = manager.publish(
        stage_upload(videoFile),
        stage_upload(thumbnail),
        owner_id=current_user.id,
        title=title.strip(),
        description=description.strip(),
    )
    return api_response(status.HTTP_201_CREATED, video, "Video is published successfully")


@router.get("/{videoId}")
def get_video_by_id(
    videoId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    video = _videos(db_session).get_or_404(parse_id(videoId, "video"))
    return api_response(status.HTTP_200_OK, video, "Video is fetched successfully")


@router.patch("/{videoId}")
def update_video(
    videoId: str,
    payload: VideoUpdate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update title and description (only by the video owner).
    """
    video_id = parse_id(videoId, "video")
    if is_blank(payload.title) or is_blank(payload.description):
        raise InvalidArgument("All fields are required i.e. title and description.")

    updated = _videos(db_session).update_owned(
        video_id,
        current_user.id,
        {"title": payload.title.strip(), "description": payload.description.strip()},
    )
    logger.info(f"User {current_user.id} updated video {video_id}")
    return api_response(status.HTTP_200_OK, updated, "Video details are updated successfully")


@router.patch("/{videoId}/thumbnail")
def update_video_thumbnail(
    videoId: str,
    thumbnail: Optional[UploadFile] = File(None),
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    media_host: MediaHost = Depends(get_media_host),
):
    """
    Replace the thumbnail; the previous one is removed from the media host.
    """
    videos = _videos(db_session)
    video = videos.get_owned(parse_id(videoId, "video"), current_user.id, "update the thumbnail of")

    manager = MediaLifecycleManager(media_host, videos.store)
    updated = manager.replace_thumbnail(video, stage_upload(thumbnail))
    return api_response(status.HTTP_200_OK, updated, "Video thumbnail updated successfully")


@router.delete("/{videoId}")
def delete_video(
    videoId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    media_host: MediaHost = Depends(get_media_host),
):
    """
    Delete a video record, then its file and thumbnail on the media host.
    """
    videos = _videos(db_session)
    video = videos.get_owned(parse_id(videoId, "video"), current_user.id, "delete")

    MediaLifecycleManager(media_host, videos.store).delete_video(video)
    return api_response(status.HTTP_200_OK, {}, "Video is deleted successfully")


@router.patch("/toggle/publish/{videoId}")
def toggle_publish_status(
    videoId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    videos = _videos(db_session)
    video_id = parse_id(videoId, "video")
    video = videos.get_owned(video_id, current_user.id, "toggle publish status for")

    updated = videos.store.update(video_id, {"is_published": not video.is_published})
    logger.info(f"User {current_user.id} set video {video_id} published={updated.is_published}")
    return api_response(status.HTTP_200_OK, updated, "Video publish status is toggled successfully")
