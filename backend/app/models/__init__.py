"""SQLAlchemy models package."""
from app.models.user import User
from app.models.confirmation_token import ConfirmationToken
from app.models.account import Account, AccountUser
from app.models.transaction import Transaction

__all__ = [
    "User",
    "ConfirmationToken",
    "Account",
    "AccountUser",
    "Transaction",
]
