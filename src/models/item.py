"""List item and per-user watched status models."""

from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import VideoPlatform
from src.models.mixins import TimestampMixin

DEFAULT_RATINGS = {"category1": 0, "category2": 0, "category3": 0}


class ListItem(Base, TimestampMixin):
    """A video link added to a list."""

    __tablename__ = "list_items"

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("lists.id"), nullable=False, index=True)
    added_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    video_url = Column(String(2048), nullable=False)
    title = Column(String(500), nullable=False)

    # Optional metadata from the video platform
    thumbnail_url = Column(String(2048), nullable=True)
    duration = Column(String(50), nullable=True)
    author_name = Column(String(255), nullable=True)
    description = Column(String, nullable=True)
    view_count = Column(BigInteger, nullable=True)
    like_count = Column(BigInteger, nullable=True)
    published_at = Column(String(50), nullable=True)
    platform = Column(String(20), default=VideoPlatform.OTHER.value, nullable=False)
    tags = Column(JSON, nullable=True)
    # {"category1": n, "category2": n, "category3": n}
    ratings = Column(JSON, nullable=True)

    # Relationships
    added_by = relationship("User")


class UserWatchedItem(Base, TimestampMixin):
    """Per-viewer watched flag for a list item."""

    __tablename__ = "user_watched_items"
    __table_args__ = (UniqueConstraint("user_id", "item_id", name="uq_user_watched_items"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("list_items.id"), nullable=False, index=True)
    watched = Column(Boolean, default=True, nullable=False)
