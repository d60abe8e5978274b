"""User schemas."""
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.schemas.auth import check_password_bytes


class UserResponse(BaseModel):
    """Public view of the current user. Password fields are never exposed."""

    id: str
    email: str
    registration_date: datetime
    is_verified: bool

    class Config:
        from_attributes = True


class ChangePasswordRequest(BaseModel):
    """Password change request."""

    new_password: str = Field(
        ...,
        min_length=8,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )

    @field_validator("new_password")
    @classmethod
    def validate_password_bytes(cls, value: str) -> str:
        return check_password_bytes(value)
