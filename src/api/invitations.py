"""Invitation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_invitation_service
from src.models.user import User
from src.schemas.invitation import InvitationCreate, InvitationResponse, InvitationStatusResponse
from src.services.invitation_service import InvitationService

router = APIRouter(prefix="/api/v1", tags=["invitations"])


@router.get("/lists/{list_id}/invitations", response_model=list[InvitationStatusResponse])
def get_invitations(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    invitation_service: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Get a list's invitations (owner only)."""
    return invitation_service.list_invitations(list_id, current_user)


@router.post(
    "/lists/{list_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
def invite_user(
    list_id: int,
    data: InvitationCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    invitation_service: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Invite someone to a list by email (owner only, verified email required)."""
    return invitation_service.invite(list_id, data.email, current_user)


@router.delete("/invitations/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_invitation(
    invitation_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    invitation_service: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Withdraw an invitation."""
    invitation_service.remove_invitation(invitation_id, current_user)


@router.post("/invitations/{invitation_id}/resend", response_model=InvitationResponse)
def resend_invitation(
    invitation_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    invitation_service: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Send the invitation email again."""
    return invitation_service.resend_invitation(invitation_id, current_user)
