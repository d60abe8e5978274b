"""User model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class User(Base):
    """Registered user. Login is gated on ``is_verified``."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    registration_date = Column(DateTime, nullable=False, default=utcnow)
    is_verified = Column(Boolean, nullable=False, default=False)

    # Relationships (no ORM cascades: deletion is an explicit ordered operation)
    confirmation_tokens = relationship("ConfirmationToken", back_populates="user", passive_deletes=True)
    accounts = relationship("Account", back_populates="owner", passive_deletes=True)
