"""User profile and username service."""

import logging
import re

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.models.user import User, Username
from src.schemas.auth import UserResponse
from src.services.permissions import is_user_verified

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9_]{3,30}$")


def normalize_username(username: str) -> str:
    """Lowercase a username and validate its characters."""
    normalized = username.strip().lower()
    if not USERNAME_PATTERN.match(normalized):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Username must be 3-30 characters of lowercase letters, digits or underscores",
        )
    return normalized


class UserService:
    """Service for usernames and profile updates."""

    def __init__(self, db: Session):
        self.db = db

    def to_response(self, user: User) -> UserResponse:
        """Build the profile response, including the computed verification flag."""
        response = UserResponse.model_validate(user)
        response.email_verified = is_user_verified(self.db, user)
        return response

    def is_username_available(self, username: str) -> bool:
        normalized = username.strip().lower()
        return self.db.query(Username).filter(Username.username == normalized).first() is None

    def claim_username(self, user: User, username: str, commit: bool = True) -> Username:
        """Create the first username for a user."""
        normalized = normalize_username(username)

        if not self.is_username_available(normalized):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username is already taken",
            )

        existing = self.db.query(Username).filter(Username.user_id == user.id).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User already has a username",
            )

        record = Username(username=normalized, user_id=user.id)
        self.db.add(record)
        if commit:
            self.db.commit()
            self.db.refresh(record)
        logger.info(f"User {user.id} claimed username '{normalized}'")
        return record

    def update_profile(self, user: User, name: str | None, username: str | None) -> User:
        """Update display name and/or username.

        A changed username replaces the user's existing record in place.
        """
        if name is not None:
            user.name = name

        if username is not None:
            normalized = normalize_username(username)
            taken = self.db.query(Username).filter(Username.username == normalized).first()
            if taken and taken.user_id != user.id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Username is already taken",
                )

            current = self.db.query(Username).filter(Username.user_id == user.id).first()
            if current:
                current.username = normalized
            else:
                self.db.add(Username(username=normalized, user_id=user.id))

        self.db.commit()
        self.db.refresh(user)
        return user

    def get_by_username(self, username: str) -> User:
        record = (
            self.db.query(Username).filter(Username.username == username.strip().lower()).first()
        )
        if not record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return record.user

    def get_by_id(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user
