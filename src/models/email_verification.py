"""Email verification token model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from src.database import Base
from src.models.mixins import TimestampMixin


class EmailVerification(Base, TimestampMixin):
    """Single outstanding verification token per email address."""

    __tablename__ = "email_verifications"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
