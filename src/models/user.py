"""User and username models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User account, either password-based or anonymous."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    email_verification_time = Column(DateTime(timezone=True), nullable=True)

    username_record = relationship(
        "Username", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def username(self) -> str | None:
        """The user's handle, if one has been claimed."""
        return self.username_record.username if self.username_record else None


class Username(Base, TimestampMixin):
    """Unique handle mapped to exactly one user."""

    __tablename__ = "usernames"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    user = relationship("User", back_populates="username_record")
