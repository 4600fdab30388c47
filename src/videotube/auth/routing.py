import logging

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from videotube.db.models import User
from videotube.db.session import get_session
from videotube.db.store import ResourceStore
from videotube.errors import ApiError, InvalidArgument
from videotube.responses import api_response
from .models import Token, UserCreate, UserLogin, UserPublic
from .utils import (
    hash_password,
    verify_password,
    create_access_token,
    get_current_user,
)

logger = logging.getLogger("auth")

router = APIRouter(tags=["auth"])


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token({"sub": user.id}),
        user=UserPublic.model_validate(user, from_attributes=True),
    )


@router.post("/signup")
def signup(payload: UserCreate, db: Session = Depends(get_session)):
    users = ResourceStore(db, User)
    if users.exists((User.username == payload.username) | (User.email == payload.email)):
        raise InvalidArgument("Username or email already registered")

    user = users.create(
        username=payload.username,
        email=payload.email,
        hashed_password=hash_password(payload.password),
    )
    logger.info(f"Registered user {user.id}")
    return api_response(status.HTTP_201_CREATED, _token_for(user), "User registered successfully")


def _authenticate(db: Session, username: str, password: str) -> User:
    user = ResourceStore(db, User).find_one(User.username == username)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login for {username}")
        raise ApiError("Invalid credentials", status_code=status.HTTP_401_UNAUTHORIZED)
    return user


@router.post("/login")
def login(payload: UserLogin, db: Session = Depends(get_session)):
    user = _authenticate(db, payload.username, payload.password)
    return api_response(status.HTTP_200_OK, _token_for(user), "User logged in successfully")


@router.post("/token")
def issue_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_session)):
    """
    OAuth2 password flow (form fields username and password), used by the docs
    "Authorize" dialog. Answers with a bare token body, not the envelope.
    """
    user = _authenticate(db, form_data.username.strip().lower(), form_data.password)
    return {"access_token": create_access_token({"sub": user.id}), "token_type": "bearer"}


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return api_response(
        status.HTTP_200_OK,
        UserPublic.model_validate(current_user, from_attributes=True),
        "Current user fetched successfully",
    )
