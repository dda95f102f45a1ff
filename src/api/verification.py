"""Email verification API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_current_user, get_verification_service
from src.models.user import User
from src.schemas.verification import VerificationStatus, VerifyEmailRequest, VerifyEmailResponse
from src.services.permissions import is_user_verified
from src.services.verification_service import VerificationService

router = APIRouter(prefix="/api/v1/verification", tags=["verification"])


@router.post("/request", status_code=status.HTTP_202_ACCEPTED)
def request_verification(
    current_user: Annotated[User, Depends(get_current_user)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Send a new verification link to the current user's email."""
    if not current_user.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account has no email address",
        )
    verification_service.create_verification_token(current_user.email)
    return {"success": True}


@router.post("/verify", response_model=VerifyEmailResponse)
def verify_email(
    data: VerifyEmailRequest,
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Consume a verification token from an emailed link."""
    verification = verification_service.verify_email(data.token)
    return VerifyEmailResponse(email=verification.email)


@router.get("/status", response_model=VerificationStatus)
def get_verification_status(
    current_user: Annotated[User, Depends(get_current_user)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Whether the current user's email has been verified."""
    return VerificationStatus(
        email=current_user.email,
        verified=is_user_verified(verification_service.db, current_user),
    )
