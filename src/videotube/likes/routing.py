import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from videotube.auth.utils import get_current_user
from videotube.db.models import Comment, Like, Tweet, User, Video
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import NotFound
from videotube.responses import api_response
from videotube.utils import parse_id

logger = logging.getLogger("likes")

router = APIRouter(tags=["likes"])

# target kind -> (target table, Like column pointing at it)
LIKE_TARGETS = {
    "video": (Video, Like.video_id),
    "comment": (Comment, Like.comment_id),
    "tweet": (Tweet, Like.tweet_id),
}


def toggle_like(db_session: Session, target_kind: str, target_id: str, user_id: str) -> bool:
    """Flip whether ``user_id`` likes the target and return the new state.

    Removing is a single delete-if-exists; adding relies on the per-target
    unique constraint, so a concurrent duplicate like still leaves one row.
    """
    model, column = LIKE_TARGETS[target_kind]
    if not ResourceStore(db_session, model).exists(model.id == target_id):
        raise NotFound(f"{target_kind.capitalize()} not found.")

    likes = ResourceStore(db_session, Like)
    if likes.delete_where(column == target_id, Like.liked_by == user_id):
        logger.info(f"User {user_id} unliked {target_kind} {target_id}")
        return False

    if likes.insert_if_absent(liked_by=user_id, **{column.key: target_id}) is None:
        logger.info(f"Concurrent like by user {user_id} on {target_kind} {target_id} already recorded")
    else:
        logger.info(f"User {user_id} liked {target_kind} {target_id}")
    return True


def _toggle_response(target_kind: str, is_liked: bool):
    label = target_kind.capitalize()
    if is_liked:
        return api_response(status.HTTP_201_CREATED, {"isLiked": True}, f"{label} liked successfully.")
    return api_response(status.HTTP_200_OK, {"isLiked": False}, f"{label} unliked successfully.")


@router.post("/toggle/v/{videoId}")
def toggle_video_like(
    videoId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    video_id = parse_id(videoId, "video")
    return _toggle_response("video", toggle_like(db_session, "video", video_id, current_user.id))


@router.post("/toggle/c/{commentId}")
def toggle_comment_like(
    commentId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    comment_id = parse_id(commentId, "comment")
    return _toggle_response("comment", toggle_like(db_session, "comment", comment_id, current_user.id))


@router.post("/toggle/t/{tweetId}")
def toggle_tweet_like(
    tweetId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet_id = parse_id(tweetId, "tweet")
    return _toggle_response("tweet", toggle_like(db_session, "tweet", tweet_id, current_user.id))


@router.get("/videos")
def get_liked_videos(
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Videos the current user liked, most recent like first.
    Likes whose video has since been deleted are skipped.
    """
    likes = ResourceStore(db_session, Like).find(
        Like.liked_by == current_user.id,
        Like.video_id.is_not(None),
    )
    videos = {
        video.id: video
        for video in ResourceStore(db_session, Video).find(Video.id.in_([like.video_id for like in likes]))
    }
    liked = [
        {"id": like.id, "liked_at": like.created_at, "video": videos[like.video_id]}
        for like in likes
        if like.video_id in videos
    ]
    return api_response(status.HTTP_200_OK, liked, "Liked videos are fetched successfully")
