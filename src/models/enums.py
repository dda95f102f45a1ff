"""Enums for model fields."""

from enum import Enum


class Capability(str, Enum):
    """Capabilities a permission group can grant on a list."""

    VIEW = "can_view"
    ADD = "can_add"
    REMOVE = "can_remove"


class InvitationStatus(str, Enum):
    """Lifecycle states of a list invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"


class AccessLevel(str, Enum):
    """How a shared list became visible to the caller."""

    INVITED = "Invited"
    USERS = "Users"


class VideoPlatform(str, Enum):
    """Video hosting platforms recognised for metadata enrichment."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    DAILYMOTION = "dailymotion"
    TWITCH = "twitch"
    OTHER = "other"
