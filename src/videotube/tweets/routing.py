import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlmodel import Session

from videotube.auth.utils import get_current_user
from videotube.db.models import Tweet, User
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import InvalidArgument, NotFound
from videotube.ownership import OwnedResource
from videotube.pagination import paginate, parse_page_params
from videotube.responses import api_response
from videotube.utils import is_blank, parse_id

logger = logging.getLogger("tweets")

router = APIRouter(tags=["tweets"])


class TweetBody(BaseModel):
    content: Optional[str] = None


def _require_content(payload: TweetBody) -> str:
    if is_blank(payload.content):
        raise InvalidArgument("Content is required.")
    return payload.content.strip()


def _tweets(db_session: Session) -> OwnedResource[Tweet]:
    return OwnedResource(ResourceStore(db_session, Tweet), "tweet")


@router.post("/")
def create_tweet(
    payload: TweetBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet = ResourceStore(db_session, Tweet).create(
        content=_require_content(payload),
        owner_id=current_user.id,
    )
    logger.info(f"User {current_user.id} created tweet {tweet.id}")
    return api_response(status.HTTP_201_CREATED, tweet, "Tweet created successfully.")


@router.get("/user/{userId}")
def get_user_tweets(
    userId: str,
    page: str = "1",
    limit: str = "10",
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get a user's tweets, newest first. Unlike comments, an empty page is a normal result.
    """
    user_id = parse_id(userId, "user")
    page_number, limit_number = parse_page_params(page, limit)

    if not ResourceStore(db_session, User).exists(User.id == user_id):
        raise NotFound("User not found.")

    store = ResourceStore(db_session, Tweet)
    total = store.count(Tweet.owner_id == user_id)
    window = paginate(page_number, limit_number, total)
    tweets = store.find(Tweet.owner_id == user_id, skip=window.skip, limit=window.limit)

    return api_response(
        status.HTTP_200_OK,
        {"tweets": tweets, "count": total, "pagination": window.pagination()},
        "User tweets fetched successfully.",
    )


@router.patch("/{tweetId}")
def update_tweet(
    tweetId: str,
    payload: TweetBody,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet_id = parse_id(tweetId, "tweet")
    content = _require_content(payload)

    updated = _tweets(db_session).update_owned(tweet_id, current_user.id, {"content": content})
    logger.info(f"User {current_user.id} updated tweet {tweet_id}")
    return api_response(status.HTTP_200_OK, updated, "Tweet updated successfully.")


@router.delete("/{tweetId}")
def delete_tweet(
    tweetId: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet_id = parse_id(tweetId, "tweet")
    _tweets(db_session).delete_owned(tweet_id, current_user.id)
    logger.info(f"User {current_user.id} deleted tweet {tweet_id}")
    return api_response(status.HTTP_200_OK, {}, "Tweet deleted successfully.")
