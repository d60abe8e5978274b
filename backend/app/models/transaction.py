"""Transaction model."""
import uuid

from sqlalchemy import Column, Date, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Transaction(Base):
    """Income or expense recorded against an account."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_account_date", "account_id", "date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)

    category = Column(String(100), nullable=False)
    value = Column(Float, nullable=False)  # Positive = income, negative = expense
    date = Column(Date, nullable=False)
    to_whom = Column(String(255))
    comment = Column(Text)

    # Relationships
    account = relationship("Account", back_populates="transactions")
