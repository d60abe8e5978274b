"""Account and transaction schemas."""
from datetime import date

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Account creation request."""

    name: str = Field(..., min_length=1, max_length=100)


class AccountResponse(BaseModel):
    """Account response."""

    id: str
    name: str
    user_id: str

    class Config:
        from_attributes = True


class TransactionCreate(BaseModel):
    """Transaction creation request."""

    account_id: str
    category: str = Field(..., min_length=1, max_length=100)
    value: float  # Positive = income, negative = expense
    date: date
    to_whom: str | None = Field(None, max_length=255)
    comment: str | None = None


class TransactionResponse(BaseModel):
    """Transaction response."""

    id: str
    account_id: str
    category: str
    value: float
    date: date
    to_whom: str | None
    comment: str | None

    class Config:
        from_attributes = True


class MemberAdd(BaseModel):
    """Request to share an account with another user."""

    account_id: str
    email: str = Field(..., max_length=255)


class MemberResponse(BaseModel):
    """A user who shares an account."""

    id: str
    email: str

    class Config:
        from_attributes = True
