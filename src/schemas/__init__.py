"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, Token, UserLogin, UserRegister, UserResponse
from src.schemas.invitation import InvitationCreate, InvitationResponse, InvitationStatusResponse
from src.schemas.item import ItemCreate, ItemResponse, ItemUpdate, Ratings, WatchedResponse
from src.schemas.list import (
    ListAccessResponse,
    ListCreate,
    ListResponse,
    PermissionGroup,
    PermissionMatrix,
    SharedListResponse,
)
from src.schemas.user import ProfileUpdate, PublicProfile, UsernameAvailability, UsernameClaim
from src.schemas.verification import VerificationStatus, VerifyEmailRequest, VerifyEmailResponse
from src.schemas.video import VideoMetadataRequest, VideoMetadataResponse

AuthResponse.model_rebuild()

__all__ = [
    "UserRegister",
    "UserLogin",
    "Token",
    "AuthResponse",
    "UserResponse",
    "UsernameClaim",
    "UsernameAvailability",
    "ProfileUpdate",
    "PublicProfile",
    "PermissionGroup",
    "PermissionMatrix",
    "ListCreate",
    "ListResponse",
    "ListAccessResponse",
    "SharedListResponse",
    "ItemCreate",
    "ItemUpdate",
    "ItemResponse",
    "Ratings",
    "WatchedResponse",
    "InvitationCreate",
    "InvitationResponse",
    "InvitationStatusResponse",
    "VerifyEmailRequest",
    "VerifyEmailResponse",
    "VerificationStatus",
    "VideoMetadataRequest",
    "VideoMetadataResponse",
]
