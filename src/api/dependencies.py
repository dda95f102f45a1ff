"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token
from src.services.invitation_service import InvitationService
from src.services.item_service import ItemService
from src.services.list_service import ListService
from src.services.user_service import UserService
from src.services.verification_service import VerificationService
from src.services.video_metadata import VideoMetadataService

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _credentials_exception(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(db: Session, token: str) -> User:
    payload = decode_access_token(token)
    if payload is None:
        raise _credentials_exception()

    user_id = payload.get("sub")
    if user_id is None:
        raise _credentials_exception()

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise _credentials_exception("User not found")

    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    return _user_from_token(db, credentials.credentials)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Get the current user if a token was sent, otherwise None.

    A token that is sent but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _user_from_token(db, credentials.credentials)


def get_list_service(db: Annotated[Session, Depends(get_db)]) -> ListService:
    """Get list service with dependencies."""
    return ListService(db)


def get_item_service(db: Annotated[Session, Depends(get_db)]) -> ItemService:
    """Get item service with dependencies."""
    return ItemService(db)


def get_invitation_service(db: Annotated[Session, Depends(get_db)]) -> InvitationService:
    """Get invitation service with dependencies."""
    return InvitationService(db)


def get_verification_service(db: Annotated[Session, Depends(get_db)]) -> VerificationService:
    """Get verification service with dependencies."""
    return VerificationService(db)


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


def get_video_metadata_service() -> VideoMetadataService:
    """Get video metadata service instance."""
    return VideoMetadataService()
