"""Invitation lifecycle service."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.enums import InvitationStatus
from src.models.item import ListItem
from src.models.list import List, ListInvitation
from src.models.user import User
from src.schemas.invitation import InvitationStatusResponse
from src.services.permissions import find_invitation, is_user_verified, normalize_email

logger = logging.getLogger(__name__)


class InvitationService:
    """Service for inviting collaborators to a list by email."""

    def __init__(self, db: Session):
        self.db = db

    def _require_verified(self, user: User, action: str) -> None:
        if not is_user_verified(self.db, user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Email verification required to {action}",
            )

    def _already_invited(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User is already invited to this list",
        )

    def _get_owned_list(self, list_id: int, user: User) -> List:
        list_obj = self.db.get(List, list_id)
        if not list_obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
        if list_obj.owner_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User is not the owner of this list",
            )
        return list_obj

    def _get_owned_invitation(self, invitation_id: int, user: User) -> ListInvitation:
        invitation = self.db.get(ListInvitation, invitation_id)
        if not invitation:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Invitation not found"
            )
        self._get_owned_list(invitation.list_id, user)
        return invitation

    def invite(self, list_id: int, email: str, user: User) -> ListInvitation:
        """Invite an email address to a list and queue the invitation email."""
        self._require_verified(user, "invite users")
        self._get_owned_list(list_id, user)

        invited_email = normalize_email(email)
        if find_invitation(self.db, list_id, invited_email):
            raise self._already_invited()

        invitation = ListInvitation(
            list_id=list_id,
            invited_email=invited_email,
            invited_by_id=user.id,
            status=InvitationStatus.PENDING.value,
        )
        self.db.add(invitation)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request inserted the same (list, email) pair
            self.db.rollback()
            raise self._already_invited() from None
        self.db.refresh(invitation)
        logger.info(f"User {user.id} invited {invited_email} to list {list_id}")

        from src.tasks.emails import queue_invitation_email

        queue_invitation_email(invitation.id)
        return invitation

    def list_invitations(self, list_id: int, user: User) -> list[InvitationStatusResponse]:
        """Invitations of a list with a best-effort "has accessed" flag.

        ``has_accessed`` is true when an account exists for the invited email
        and the list has at least one item. View events are not tracked.
        """
        self._get_owned_list(list_id, user)

        invitations = (
            self.db.query(ListInvitation)
            .filter(ListInvitation.list_id == list_id)
            .order_by(ListInvitation.created_at, ListInvitation.id)
            .all()
        )
        list_has_items = (
            self.db.query(ListItem.id).filter(ListItem.list_id == list_id).first() is not None
        )

        result = []
        for invitation in invitations:
            invited_user = (
                self.db.query(User).filter(User.email == invitation.invited_email).first()
            )
            response = InvitationStatusResponse(
                id=invitation.id,
                list_id=invitation.list_id,
                invited_email=invitation.invited_email,
                invited_by_id=invitation.invited_by_id,
                status=invitation.status,
                created_at=invitation.created_at,
                invited_user_exists=invited_user is not None,
                has_accessed=invited_user is not None and list_has_items,
            )
            result.append(response)
        return result

    def remove_invitation(self, invitation_id: int, user: User) -> None:
        self._require_verified(user, "manage invitations")
        invitation = self._get_owned_invitation(invitation_id, user)
        self.db.delete(invitation)
        self.db.commit()
        logger.info(f"User {user.id} removed invitation {invitation_id}")

    def resend_invitation(self, invitation_id: int, user: User) -> ListInvitation:
        """Reset the invitation to pending and queue the email again."""
        self._require_verified(user, "resend invitations")
        invitation = self._get_owned_invitation(invitation_id, user)

        invitation.status = InvitationStatus.PENDING.value
        self.db.commit()
        self.db.refresh(invitation)

        from src.tasks.emails import queue_invitation_email

        queue_invitation_email(invitation.id)
        return invitation
