# auth.py
import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from skillgap.config import settings
from skillgap.database import get_db
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user
from skillgap.schemas.user import (
    MessageResponse,
    ProfileUpdate,
    RefreshRequest,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    Token,
    UserRead,
)
from skillgap.utils.jwt_handler import REFRESH_TOKEN_TYPE, create_access_token, create_refresh_token, decode_access_token
from skillgap.utils.password_hash import hash_password, verify_password


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user: User) -> Token:
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expires_at = datetime.now(timezone.utc) + expires_delta
    claims = {"sub": str(user.id)}
    return Token(
        access_token=create_access_token(claims, expires_delta),
        refresh_token=create_refresh_token(claims),
        token_type="bearer",
        expires_at=int(expires_at.timestamp()),
    )


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def signup(user_in: SignupRequest, db: Session = Depends(get_db)) -> UserRead:
    existing_user = db.query(User).filter(User.email == user_in.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    user = User(
        email=user_in.email,
        password=hash_password(user_in.password),
        name=user_in.name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("auth.signup user_id=%s", user.id)
    return UserRead.model_validate(user)


@router.post("/signin", response_model=SigninResponse)
def signin(user_in: SigninRequest, db: Session = Depends(get_db)) -> SigninResponse:
    user = db.query(User).filter(User.email == user_in.email).first()
    if not user or not verify_password(user_in.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return SigninResponse(user=UserRead.model_validate(user), session=_issue_tokens(user))


@router.post("/refresh", response_model=Token)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)) -> Token:
    claims = decode_access_token(payload.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    subject = claims.get("sub")
    user = db.query(User).filter(User.id == int(subject)).first() if str(subject or "").isdigit() else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return _issue_tokens(user)


@router.post("/signout", response_model=MessageResponse)
def signout(current_user: User = Depends(get_current_user)) -> MessageResponse:
    # Tokens are stateless; the client discards them.
    logger.info("auth.signout user_id=%s", current_user.id)
    return MessageResponse(message="Signed out successfully")


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put("/profile", response_model=UserRead)
def update_profile(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserRead:
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(current_user, field, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return UserRead.model_validate(current_user)
