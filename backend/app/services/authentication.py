"""Credential checks and session token issuance."""
from enum import Enum
import logging

from sqlalchemy.orm import Session

from app.models.user import User
from app.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    password_too_long,
    verify_password,
)
from app.services.exceptions import EmailNotVerifiedError

logger = logging.getLogger(__name__)


class LoginOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    UNVERIFIED = "unverified"
    INVALID_CREDENTIALS = "invalid_credentials"


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def authenticate(db: Session, email: str, password: str) -> tuple[LoginOutcome, User | None]:
    """Check credentials, then the verified flag.

    The password is checked first, so a wrong password reports
    ``INVALID_CREDENTIALS`` whatever the verification state. An unknown
    email still costs one bcrypt comparison. Passwords longer than bcrypt
    accepts can never match.
    """
    user = get_user_by_email(db, email)
    if user is None:
        verify_password(password, DUMMY_PASSWORD_HASH)
        logger.warning("Incorrect credentials submitted")
        return LoginOutcome.INVALID_CREDENTIALS, None

    if password_too_long(password) or not verify_password(password, user.password_hash):
        logger.warning("Incorrect credentials submitted")
        return LoginOutcome.INVALID_CREDENTIALS, None

    if not user.is_verified:
        logger.warning(f"Login attempt for unverified user {user.id}")
        return LoginOutcome.UNVERIFIED, user

    return LoginOutcome.AUTHENTICATED, user


def issue_session_token(email: str) -> str:
    return create_access_token(email)


def refresh_session_token(user: User) -> str:
    """Issue a new session token; the verified flag is re-checked every time."""
    if not user.is_verified:
        logger.warning(f"Token refresh refused for unverified user {user.id}")
        raise EmailNotVerifiedError()
    logger.info(f"Token refreshed for user {user.id}")
    return issue_session_token(user.email)
