"""List lifecycle service."""

import logging
import secrets

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.models.enums import AccessLevel, Capability
from src.models.item import ListItem, UserWatchedItem
from src.models.list import List, ListInvitation
from src.models.user import User
from src.schemas.list import ListAccessResponse, ListResponse, SharedListResponse
from src.services.permissions import (
    ListAccess,
    get_default_permissions,
    get_list_permissions,
    has_permission,
    normalize_email,
    resolve_list_access,
)

logger = logging.getLogger(__name__)


def generate_share_token() -> str:
    """128-bit URL-safe capability token for link sharing."""
    return secrets.token_urlsafe(16)


def to_list_response(list_obj: List) -> ListResponse:
    """Serialize a list with its effective permission matrix."""
    return ListResponse(
        id=list_obj.id,
        name=list_obj.name,
        owner_id=list_obj.owner_id,
        share_token=list_obj.share_token,
        permissions=get_list_permissions(list_obj),
        created_at=list_obj.created_at,
        updated_at=list_obj.updated_at,
    )


class ListService:
    """Service for creating, reading, sharing and deleting lists."""

    def __init__(self, db: Session):
        self.db = db

    def get_list_or_404(self, list_id: int) -> List:
        list_obj = self.db.get(List, list_id)
        if not list_obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
        return list_obj

    def get_owned_list(self, list_id: int, user: User) -> List:
        """Get a list the user owns, or raise 403/404."""
        list_obj = self.get_list_or_404(list_id)
        if list_obj.owner_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User is not the owner of this list",
            )
        return list_obj

    def require_view(self, list_obj: List, user_id: int | None) -> None:
        """Reject callers who cannot see the list.

        Hidden lists answer exactly like missing ones.
        """
        if not has_permission(self.db, list_obj, user_id, Capability.VIEW):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")

    def create_list(self, name: str, owner: User) -> List:
        """Create a list with a fresh share token and the default matrix."""
        list_obj = List(
            name=name,
            owner_id=owner.id,
            share_token=generate_share_token(),
            permissions=get_default_permissions(),
        )
        self.db.add(list_obj)
        self.db.commit()
        self.db.refresh(list_obj)
        logger.info(f"User {owner.id} created list {list_obj.id}")
        return list_obj

    def get_list(self, list_id: int, user_id: int | None) -> List:
        list_obj = self.get_list_or_404(list_id)
        self.require_view(list_obj, user_id)
        return list_obj

    def get_list_by_share_token(self, share_token: str, user_id: int | None) -> List:
        list_obj = self.db.query(List).filter(List.share_token == share_token).first()
        if not list_obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
        self.require_view(list_obj, user_id)
        return list_obj

    def get_access(self, list_id: int, user_id: int | None) -> ListAccess:
        return resolve_list_access(self.db, self.get_list_or_404(list_id), user_id)

    def get_my_lists(self, user: User) -> list[List]:
        """Lists owned by the user, newest first."""
        return (
            self.db.query(List)
            .filter(List.owner_id == user.id)
            .order_by(List.created_at.desc(), List.id.desc())
            .all()
        )

    def get_shared_lists(self, user: User) -> list[SharedListResponse]:
        """Lists other users shared with the caller.

        Invitation matches come first and are labelled "Invited"; lists open
        to all signed-in users follow, labelled "Users". A list appears once.
        The users-group flag is filtered in SQL; lists without a stored
        matrix default to not visible to users, so they never match.
        """
        shared: dict[int, SharedListResponse] = {}

        if user.email:
            invited_lists = (
                self.db.query(List)
                .join(ListInvitation, ListInvitation.list_id == List.id)
                .filter(
                    ListInvitation.invited_email == normalize_email(user.email),
                    List.owner_id != user.id,
                )
                .order_by(List.created_at.desc(), List.id.desc())
                .all()
            )
            for list_obj in invited_lists:
                access = resolve_list_access(self.db, list_obj, user.id)
                if access.can_view and list_obj.id not in shared:
                    shared[list_obj.id] = self._shared_response(
                        list_obj, AccessLevel.INVITED, access
                    )

        candidates = (
            self.db.query(List)
            .filter(
                List.owner_id != user.id,
                List.permissions[("users", "can_view")].as_boolean(),
            )
            .order_by(List.created_at.desc(), List.id.desc())
            .all()
        )
        for list_obj in candidates:
            if list_obj.id in shared:
                continue
            access = resolve_list_access(self.db, list_obj, user.id)
            if access.can_view:
                shared[list_obj.id] = self._shared_response(list_obj, AccessLevel.USERS, access)

        return list(shared.values())

    def _shared_response(
        self, list_obj: List, access_level: AccessLevel, access: ListAccess
    ) -> SharedListResponse:
        base = to_list_response(list_obj)
        return SharedListResponse(
            **base.model_dump(),
            access_level=access_level.value,
            access=ListAccessResponse(**access.to_dict()),
        )

    def update_permissions(self, list_id: int, user: User, permissions: dict) -> List:
        """Replace the whole permission matrix (owner only)."""
        list_obj = self.get_owned_list(list_id, user)
        list_obj.permissions = permissions
        self.db.commit()
        self.db.refresh(list_obj)
        logger.info(f"User {user.id} updated permissions on list {list_id}")
        return list_obj

    def delete_list(self, list_id: int, user: User) -> None:
        """Delete a list and everything that references it (owner only).

        Children are removed before the parent and the whole cascade is
        committed once, so a failure leaves nothing half-deleted.
        """
        list_obj = self.get_owned_list(list_id, user)

        item_ids = [
            item_id
            for (item_id,) in self.db.query(ListItem.id).filter(ListItem.list_id == list_id).all()
        ]
        try:
            if item_ids:
                self.db.query(UserWatchedItem).filter(
                    UserWatchedItem.item_id.in_(item_ids)
                ).delete()
                self.db.query(ListItem).filter(ListItem.list_id == list_id).delete()
            invitation_count = (
                self.db.query(ListInvitation)
                .filter(ListInvitation.list_id == list_id)
                .delete()
            )
            self.db.delete(list_obj)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"User {user.id} deleted list {list_id} with {len(item_ids)} items "
            f"and {invitation_count} invitations"
        )
