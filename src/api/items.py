"""Item API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_item_service, get_optional_user
from src.models.user import User
from src.schemas.item import ItemCreate, ItemResponse, ItemUpdate, WatchedResponse
from src.services.item_service import ItemService

router = APIRouter(prefix="/api/v1", tags=["items"])


@router.get("/lists/{list_id}/items", response_model=list[ItemResponse])
def get_items(
    list_id: int,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    item_service: Annotated[ItemService, Depends(get_item_service)],
):
    """Get all items for a list, newest first."""
    user_id = current_user.id if current_user else None
    return item_service.get_items(list_id, user_id)


@router.post(
    "/lists/{list_id}/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED
)
def create_item(
    list_id: int,
    item_data: ItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    item_service: Annotated[ItemService, Depends(get_item_service)],
):
    """Add a video to a list."""
    return item_service.add_item(list_id, item_data, current_user)


@router.patch("/items/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_data: ItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    item_service: Annotated[ItemService, Depends(get_item_service)],
):
    """Update an item's title, description, tags or ratings."""
    return item_service.update_item(item_id, item_data, current_user)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    item_service: Annotated[ItemService, Depends(get_item_service)],
):
    """Delete an item."""
    item_service.remove_item(item_id, current_user)


@router.post("/items/{item_id}/watched", response_model=WatchedResponse)
def toggle_watched(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    item_service: Annotated[ItemService, Depends(get_item_service)],
):
    """Toggle the current user's watched flag on an item."""
    watched = item_service.toggle_watched(item_id, current_user)
    return WatchedResponse(item_id=item_id, watched=watched)
