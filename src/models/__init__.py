"""SQLAlchemy models."""

from src.models.email_verification import EmailVerification
from src.models.item import ListItem, UserWatchedItem
from src.models.list import List, ListInvitation
from src.models.user import User, Username

__all__ = [
    "User",
    "Username",
    "List",
    "ListInvitation",
    "ListItem",
    "UserWatchedItem",
    "EmailVerification",
]
