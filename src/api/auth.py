"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_user_service, get_verification_service
from src.database import get_db
from src.models.user import User
from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_anonymous_user,
    create_user,
    get_user_by_email,
)
from src.services.user_service import UserService, normalize_username
from src.services.verification_service import VerificationService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Register a new user and send the email verification link."""
    # Check if user already exists
    existing_user = get_user_by_email(db, user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    username = None
    if user_data.username is not None:
        username = normalize_username(user_data.username)
        if not user_service.is_username_available(username):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username is already taken",
            )

    # Create user
    user = create_user(db, user_data.email, user_data.password, user_data.name)
    if username:
        user_service.claim_username(user, username)
        db.refresh(user)

    verification_service.create_verification_token(user.email)

    # Generate token
    access_token = create_access_token(user.id, user.email)

    return AuthResponse(
        access_token=access_token,
        user=user_service.to_response(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(user.id, user.email)

    return AuthResponse(
        access_token=access_token,
        user=user_service.to_response(user),
    )


@router.post("/anonymous", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_in_anonymously(
    db: Annotated[Session, Depends(get_db)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Start a guest session backed by an anonymous user."""
    user = create_anonymous_user(db)
    access_token = create_access_token(user.id)

    return AuthResponse(
        access_token=access_token,
        user=user_service.to_response(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get current user information."""
    return user_service.to_response(current_user)


@router.post("/logout")
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return {"message": "Logged out successfully"}
