"""List API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_list_service, get_optional_user
from src.models.user import User
from src.schemas.list import (
    ListAccessResponse,
    ListCreate,
    ListResponse,
    PermissionMatrix,
    SharedListResponse,
)
from src.services.list_service import ListService, to_list_response

router = APIRouter(prefix="/api/v1/lists", tags=["lists"])


@router.get("", response_model=list[ListResponse])
def get_my_lists(
    current_user: Annotated[User, Depends(get_current_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Get all lists owned by the current user, newest first."""
    return [to_list_response(lst) for lst in list_service.get_my_lists(current_user)]


@router.post("", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
def create_list(
    list_data: ListCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Create a new list."""
    return to_list_response(list_service.create_list(list_data.name, current_user))


@router.get("/shared", response_model=list[SharedListResponse])
def get_shared_lists(
    current_user: Annotated[User, Depends(get_current_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Get lists other users have shared with the current user."""
    return list_service.get_shared_lists(current_user)


@router.get("/share/{share_token}", response_model=ListResponse)
def get_list_by_share_token(
    share_token: str,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Open a list through its share link."""
    user_id = current_user.id if current_user else None
    return to_list_response(list_service.get_list_by_share_token(share_token, user_id))


@router.get("/{list_id}", response_model=ListResponse)
def get_list(
    list_id: int,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Get a specific list."""
    user_id = current_user.id if current_user else None
    return to_list_response(list_service.get_list(list_id, user_id))


@router.get("/{list_id}/permissions", response_model=ListAccessResponse)
def get_my_permissions(
    list_id: int,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Get what the caller may do on a list."""
    user_id = current_user.id if current_user else None
    return ListAccessResponse(**list_service.get_access(list_id, user_id).to_dict())


@router.put("/{list_id}/permissions", response_model=ListResponse)
def update_permissions(
    list_id: int,
    permissions: PermissionMatrix,
    current_user: Annotated[User, Depends(get_current_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Replace a list's permission matrix (owner only)."""
    list_obj = list_service.update_permissions(list_id, current_user, permissions.model_dump())
    return to_list_response(list_obj)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    list_service: Annotated[ListService, Depends(get_list_service)],
):
    """Delete a list with its items and invitations (owner only)."""
    list_service.delete_list(list_id, current_user)
