"""Confirmation token issuance, validation and resend throttling.

A token is usable while ``now < expires_at`` and it has not been confirmed.
Confirmation checks run in a fixed order (existence, already confirmed,
expiry) so that a token which was confirmed and has since expired still
reports ``ALREADY_CONFIRMED``.

Callers own the unit of work: these functions add and flush but never commit.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
import logging
import uuid

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import utcnow
from app.models.confirmation_token import ConfirmationToken
from app.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()


class ConfirmOutcome(str, Enum):
    CONFIRMED = "confirmed"
    NOT_FOUND = "not_found"
    ALREADY_CONFIRMED = "already_confirmed"
    EXPIRED = "expired"


class ResendOutcome(str, Enum):
    ISSUED = "issued"
    ALREADY_SENT = "already_sent"


@dataclass
class ResendResult:
    outcome: ResendOutcome
    token: ConfirmationToken | None = None


def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.confirmation_token_expire_minutes)


def resend_window() -> timedelta:
    return timedelta(minutes=settings.confirmation_resend_window_minutes)


def generate_token_value() -> str:
    """Random, non-enumerable token string (uuid4: 122 random bits)."""
    return str(uuid.uuid4())


def issue_token(db: Session, user: User, now: datetime | None = None) -> ConfirmationToken:
    """Create a fresh confirmation token for ``user``."""
    now = now or utcnow()
    confirmation_token = ConfirmationToken(
        token=generate_token_value(),
        created_at=now,
        expires_at=now + token_lifetime(),
        confirmed_at=None,
        user_id=user.id,
    )
    db.add(confirmation_token)
    db.flush()
    logger.info(f"Confirmation token issued for user {user.id}")
    return confirmation_token


def get_token(db: Session, token: str) -> ConfirmationToken | None:
    return db.query(ConfirmationToken).filter(ConfirmationToken.token == token).first()


def confirm_token(db: Session, token: str, now: datetime | None = None) -> ConfirmOutcome:
    """Consume a confirmation token and mark its owner verified."""
    now = now or utcnow()
    confirmation_token = get_token(db, token)

    if confirmation_token is None:
        logger.warning("Confirmation attempted with unknown token")
        return ConfirmOutcome.NOT_FOUND
    if confirmation_token.confirmed_at is not None:
        logger.warning(f"Confirmation token {confirmation_token.id} was already confirmed")
        return ConfirmOutcome.ALREADY_CONFIRMED
    if now >= confirmation_token.expires_at:
        logger.warning(f"Confirmation token {confirmation_token.id} has expired")
        return ConfirmOutcome.EXPIRED

    # Conditional update: of two racing confirmations only one matches the row.
    result = db.execute(
        update(ConfirmationToken)
        .where(
            ConfirmationToken.id == confirmation_token.id,
            ConfirmationToken.confirmed_at.is_(None),
        )
        .values(confirmed_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.warning(f"Confirmation token {confirmation_token.id} was confirmed concurrently")
        return ConfirmOutcome.ALREADY_CONFIRMED

    db.refresh(confirmation_token)
    user = confirmation_token.user
    user.is_verified = True
    db.flush()
    logger.info(f"Email of user {user.id} is confirmed")
    return ConfirmOutcome.CONFIRMED


def get_recent_tokens(db: Session, user: User, now: datetime | None = None) -> list[ConfirmationToken]:
    """Tokens of ``user`` created inside the resend window."""
    now = now or utcnow()
    return (
        db.query(ConfirmationToken)
        .filter(
            ConfirmationToken.user_id == user.id,
            ConfirmationToken.created_at > now - resend_window(),
        )
        .all()
    )


def resend_if_needed(db: Session, user: User, now: datetime | None = None) -> ResendResult:
    """Issue a new token unless one was already issued within the resend window."""
    now = now or utcnow()
    if get_recent_tokens(db, user, now):
        logger.info(f"Confirmation token for user {user.id} is already sent")
        return ResendResult(ResendOutcome.ALREADY_SENT)

    return ResendResult(ResendOutcome.ISSUED, issue_token(db, user, now))


def delete_tokens_for_user(db: Session, user: User) -> int:
    return (
        db.query(ConfirmationToken)
        .filter(ConfirmationToken.user_id == user.id)
        .delete(synchronize_session=False)
    )
