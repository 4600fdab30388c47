import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlmodel import Session

from videotube.auth.utils import get_current_user
from videotube.db.models import Comment, User, Video
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import InvalidArgument, NotFound
from videotube.ownership import OwnedResource
from videotube.pagination import paginate, parse_page_params
from videotube.responses import api_response
from videotube.utils import is_blank, parse_id

logger = logging.getLogger("comments")

router = APIRouter(tags=["comments"])


class CommentBody(BaseModel):
    content: Optional[str] = None


def _require_content(payload: CommentBody) -> str:
    if is_blank(payload.content):
        raise InvalidArgument("Content is required.")
    return payload.content.strip()


@router.get("/{videoId}")
def get_video_comments(
    videoId: str,
    page: str = "1",
    limit: str = "10",
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get comments for a video, newest first.
    An empty page is reported as 404.
    """
    video_id = parse_id(videoId, "video")
    page_number, limit_number = parse_page_params(page, limit)

    store = ResourceStore(db_session, Comment)
    total = store.count(Comment.video_id == video_id)
    window = paginate(page_number, limit_number, total)
    comments = store.find(Comment.video_id == video_id, skip=window.skip, limit=window.limit)

    if not comments:
        raise NotFound(f"No comments found for video with id {video_id}")

    return api_response(
        status.HTTP_200_OK,
        {"comments": comments, "count": total, "pagination": window.pagination()},
        "Comments fetched successfully.",
    )


@router.post("/{videoId}")
def add_comment(
    videoId: str,
    payload: CommentBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    video_id = parse_id(videoId, "video")
    content = _require_content(payload)

    if not ResourceStore(db_session, Video).exists(Video.id == video_id):
        raise NotFound("Video not found.")

    comment = ResourceStore(db_session, Comment).create(
        content=content,
        video_id=video_id,
        owner_id=current_user.id,
    )
    logger.info(f"User {current_user.id} commented on video {video_id}")
    return api_response(status.HTTP_201_CREATED, comment, "Comment added successfully.")


@router.patch("/c/{commentId}")
def update_comment(
    commentId: str,
    payload: CommentBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update a comment (only by the comment author).
    """
    comment_id = parse_id(commentId, "comment")
    content = _require_content(payload)

    comments = OwnedResource(ResourceStore(db_session, Comment), "comment")
    updated = comments.update_owned(comment_id, current_user.id, {"content": content})
    logger.info(f"User {current_user.id} updated comment {comment_id}")
    return api_response(status.HTTP_200_OK, updated, "Comment updated successfully.")


@router.delete("/c/{commentId}")
def delete_comment(
    commentId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a comment (only by the comment author).
    """
    comment_id = parse_id(commentId, "comment")
    OwnedResource(ResourceStore(db_session, Comment), "comment").delete_owned(comment_id, current_user.id)
    logger.info(f"User {current_user.id} deleted comment {comment_id}")
    return api_response(status.HTTP_200_OK, {}, "Comment deleted successfully.")
