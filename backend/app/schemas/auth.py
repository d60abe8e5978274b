"""Authentication schemas."""
from pydantic import AliasChoices, BaseModel, Field

from app.security import MAX_PASSWORD_BYTES, password_too_long


def check_password_bytes(value: str) -> str:
    if password_too_long(value):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterAndLoginRequest(BaseModel):
    """Email/password body shared by register, login and resend-confirmation.

    ``email`` is a plain string and the password length is not capped here, so
    malformed input is answered by the services with 400 (register) or 401
    (login) rather than by request validation.
    """

    email: str = Field(..., max_length=255)
    password: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("password", "passwordHash"),
    )


class TokenResponse(BaseModel):
    """Session token response."""

    token: str
    token_type: str = "bearer"
