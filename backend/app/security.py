"""Password hashing and session token helpers."""
from datetime import timedelta
import secrets
import string

import bcrypt
from jose import jwt

from app.config import get_settings
from app.database import utcnow

settings = get_settings()

ACCESS_TOKEN_TYPE = "access"

_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"

# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:  # malformed hash or over-long password
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def generate_password(length: int | None = None) -> str:
    """Generate a random password with at least one letter and one digit."""
    length = length or settings.generated_password_length
    if length < 2:
        raise ValueError("Generated password length must be at least 2.")
    while True:
        password = "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))
        if any(c.isalpha() for c in password) and any(c.isdigit() for c in password):
            return password


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT access token whose subject is the user's email."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {"sub": subject, "exp": expire, "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT access token, raising JWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


# Compared against when the email is unknown, so that path also pays for a bcrypt check.
DUMMY_PASSWORD_HASH = get_password_hash(secrets.token_urlsafe(16))
