"""User registration with default account provisioning."""
from datetime import datetime
import logging

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import transaction, utcnow
from app.models.confirmation_token import ConfirmationToken
from app.models.user import User
from app.security import get_password_hash, password_too_long
from app.services import bookkeeping, confirmation_tokens
from app.services.authentication import get_user_by_email
from app.services.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidEmailError,
    PasswordTooLongError,
)

logger = logging.getLogger(__name__)
settings = get_settings()


def check_email(email: str) -> str:
    """Validate email syntax and return it unchanged (emails are case-sensitive as stored)."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        logger.warning(f"Invalid email format: {e}")
        raise InvalidEmailError() from e
    return email


def register_user(
    db: Session,
    email: str,
    password: str,
    now: datetime | None = None,
) -> tuple[User, ConfirmationToken]:
    """Create an unverified user, its first confirmation token and its default account.

    All writes share one unit of work. The confirmation email is not sent here;
    the caller dispatches it once this function has returned (i.e. committed).
    """
    check_email(email)
    if password_too_long(password):
        logger.warning("Registration refused: password is too long")
        raise PasswordTooLongError()
    now = now or utcnow()

    if get_user_by_email(db, email) is not None:
        logger.warning("Registration refused: email is already used")
        raise EmailAlreadyRegisteredError()

    try:
        with transaction(db):
            user = User(
                email=email,
                password_hash=get_password_hash(password),
                registration_date=now,
                is_verified=False,
            )
            db.add(user)
            db.flush()
            logger.info(f"User {user.id} was created")

            token = confirmation_tokens.issue_token(db, user, now)
            account = bookkeeping.provision_account(db, user, settings.default_account_name)
            logger.info(f"Default account {account.id} of user {user.id} was created")
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email.
        raise EmailAlreadyRegisteredError() from e

    return user, token
