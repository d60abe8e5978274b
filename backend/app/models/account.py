"""Financial account models."""
import uuid

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from app.database import Base


class Account(Base):
    """A wallet owned by one user, optionally shared with family members."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="accounts")
    members = relationship("AccountUser", back_populates="account", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="account", passive_deletes=True)


class AccountUser(Base):
    """Membership of a user in an account. The owner has one as well."""

    __tablename__ = "account_users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    account = relationship("Account", back_populates="members")
