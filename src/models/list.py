"""List and invitation models."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import InvitationStatus
from src.models.mixins import TimestampMixin


class List(Base, TimestampMixin):
    """A shareable list of videos owned by one user."""

    __tablename__ = "lists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    share_token = Column(String(64), unique=True, nullable=True, index=True)
    # {"public": {...}, "users": {...}, "invited": {...}}; NULL on legacy rows
    permissions = Column(JSON, nullable=True)

    # Relationships
    owner = relationship("User", backref="lists")


class ListInvitation(Base, TimestampMixin):
    """Invitation granting the invited group's permissions to an email address."""

    __tablename__ = "list_invitations"
    __table_args__ = (
        UniqueConstraint("list_id", "invited_email", name="uq_list_invitations_list_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("lists.id"), nullable=False, index=True)
    invited_email = Column(String(255), nullable=False, index=True)
    invited_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), default=InvitationStatus.PENDING.value, nullable=False)

    # Relationships
    list = relationship("List")
    invited_by = relationship("User")
