"""Common API dependencies.

The authenticated user is resolved here and passed explicitly to handlers and
services; nothing reads the current user from ambient state.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.security import ACCESS_TOKEN_TYPE, decode_access_token
from app.services.authentication import get_user_by_email
from app.services.email_sender import get_email_sender

__all__ = ["get_db", "get_email_sender", "get_current_user", "get_verified_user"]

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user. Verification is not checked here."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        raise credentials_exception from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise credentials_exception

    email: str | None = payload.get("sub")
    if email is None:
        raise credentials_exception

    user = get_user_by_email(db, email)
    if user is None:
        raise credentials_exception
    return user


def get_verified_user(current_user: User = Depends(get_current_user)) -> User:
    """Gate endpoints on a confirmed email address."""
    if not current_user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email is not verified!",
        )
    return current_user
