"""User profile and username API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_user_service
from src.models.user import User
from src.schemas.auth import UserResponse
from src.schemas.user import ProfileUpdate, PublicProfile, UsernameAvailability, UsernameClaim
from src.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/username-available", response_model=UsernameAvailability)
def check_username_available(
    username: str,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Check whether a username is still free."""
    return UsernameAvailability(
        username=username.strip().lower(),
        available=user_service.is_username_available(username),
    )


@router.post("/me/username", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def claim_username(
    data: UsernameClaim,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Claim a username for the current user."""
    user_service.claim_username(current_user, data.username)
    user_service.db.refresh(current_user)
    return user_service.to_response(current_user)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    data: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update the current user's display name and/or username."""
    user = user_service.update_profile(current_user, data.name, data.username)
    return user_service.to_response(user)


@router.get("/by-username/{username}", response_model=PublicProfile)
def get_user_by_username(
    username: str,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Look up a user's public profile by username."""
    return user_service.get_by_username(username)


@router.get("/{user_id}", response_model=PublicProfile)
def get_user(
    user_id: int,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Look up a user's public profile by ID."""
    return user_service.get_by_id(user_id)
