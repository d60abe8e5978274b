from datetime import datetime

import pytest

from app.models.account import Account, AccountUser
from app.models.confirmation_token import ConfirmationToken
from app.models.user import User
from app.services import bookkeeping, registration
from app.services.exceptions import EmailAlreadyRegisteredError, PasswordTooLongError
from app.services.registration import register_user

T0 = datetime(2026, 3, 1, 12, 0, 0)


def _row_counts(db) -> dict[str, int]:
    return {
        "users": db.query(User).count(),
        "tokens": db.query(ConfirmationToken).count(),
        "accounts": db.query(Account).count(),
        "memberships": db.query(AccountUser).count(),
    }


def test_failed_provisioning_rolls_back_the_whole_registration(db, monkeypatch):
    def broken_provision(*args, **kwargs):
        raise RuntimeError("account store unavailable")

    monkeypatch.setattr(bookkeeping, "provision_account", broken_provision)

    with pytest.raises(RuntimeError, match="account store unavailable"):
        register_user(db, "a@x.com", "pw-secret-1", now=T0)

    assert _row_counts(db) == {"users": 0, "tokens": 0, "accounts": 0, "memberships": 0}


def test_concurrent_duplicate_registration_is_reported_as_email_in_use(db, monkeypatch):
    register_user(db, "a@x.com", "pw-secret-1", now=T0)
    # Simulate a second request that checked for the email before the first one committed.
    monkeypatch.setattr(registration, "get_user_by_email", lambda db, email: None)

    with pytest.raises(EmailAlreadyRegisteredError):
        register_user(db, "a@x.com", "pw-secret-2", now=T0)

    assert _row_counts(db) == {"users": 1, "tokens": 1, "accounts": 1, "memberships": 1}


def test_password_longer_than_bcrypt_limit_is_refused(db):
    with pytest.raises(PasswordTooLongError):
        register_user(db, "a@x.com", "p" * 73, now=T0)

    assert db.query(User).count() == 0
