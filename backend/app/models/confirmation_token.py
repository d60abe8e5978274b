"""Email confirmation token model."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class ConfirmationToken(Base):
    """Single-use, time-boxed token proving control of an email address."""

    __tablename__ = "confirmation_tokens"
    __table_args__ = (
        Index("ix_confirmation_tokens_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    token = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
    confirmed_at = Column(DateTime)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    user = relationship("User", back_populates="confirmation_tokens")
