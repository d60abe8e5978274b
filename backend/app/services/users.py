"""User profile, deletion and password management."""
import logging

from sqlalchemy.orm import Session

from app.database import transaction
from app.models.account import AccountUser
from app.models.user import User
from app.security import generate_password, get_password_hash
from app.services import bookkeeping, confirmation_tokens
from app.services.authentication import get_user_by_email
from app.services.exceptions import EmailNotVerifiedError, UserNotFoundError
from app.services.registration import check_email

logger = logging.getLogger(__name__)


def delete_user(db: Session, user: User) -> None:
    """Delete a user and everything that references it.

    Steps run in dependency order inside one unit of work: confirmation
    tokens, then each owned account (transactions, memberships, account),
    then memberships in other users' accounts, then the user row.
    """
    user_id = user.id
    with transaction(db):
        deleted_tokens = confirmation_tokens.delete_tokens_for_user(db, user)

        owned_accounts = bookkeeping.get_owned_accounts(db, user)
        for account in owned_accounts:
            bookkeeping.purge_account(db, account)

        db.query(AccountUser).filter(AccountUser.user_id == user_id).delete(synchronize_session=False)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)

    db.expunge_all()
    logger.info(
        f"User {user_id} was deleted with {deleted_tokens} confirmation tokens "
        f"and {len(owned_accounts)} accounts"
    )


def change_password(db: Session, user: User, new_password: str) -> None:
    with transaction(db):
        user.password_hash = get_password_hash(new_password)
    logger.info(f"Password of user {user.id} was changed")


def reset_password(db: Session, email: str) -> tuple[User, str]:
    """Replace the password of a verified user with a generated one.

    Returns the user and the plain generated password for the caller to email.
    """
    check_email(email)
    user = get_user_by_email(db, email)
    if user is None:
        logger.warning("Password reset requested for unknown email")
        raise UserNotFoundError()
    if not user.is_verified:
        logger.warning(f"Password reset refused for unverified user {user.id}")
        raise EmailNotVerifiedError("User email is not verified!")

    new_password = generate_password()
    with transaction(db):
        user.password_hash = get_password_hash(new_password)
    logger.info(f"Password of user {user.id} was reset")
    return user, new_password
