"""List item lifecycle service."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.enums import Capability, VideoPlatform
from src.models.item import DEFAULT_RATINGS, ListItem, UserWatchedItem
from src.models.list import List
from src.models.user import User
from src.schemas.item import ItemCreate, ItemResponse, ItemUpdate
from src.services.permissions import has_permission
from src.services.video_metadata import clean_video_url, detect_platform

logger = logging.getLogger(__name__)

RATING_FIELDS = {
    "rating_category1": "category1",
    "rating_category2": "category2",
    "rating_category3": "category3",
}


class ItemService:
    """Service for adding, editing, removing and marking videos in a list."""

    def __init__(self, db: Session):
        self.db = db

    def _get_list(self, list_id: int) -> List:
        list_obj = self.db.get(List, list_id)
        if not list_obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
        return list_obj

    def _get_item(self, item_id: int) -> ListItem:
        item = self.db.get(ListItem, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="List item not found"
            )
        return item

    def _require_edit_rights(self, item: ListItem, user: User, action: str) -> None:
        """Item creators may always edit their own items; others need can_remove."""
        if item.added_by_id == user.id:
            return
        list_obj = self._get_list(item.list_id)
        if not has_permission(self.db, list_obj, user.id, Capability.REMOVE):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User does not have permission to {action} this item",
            )

    def add_item(self, list_id: int, data: ItemCreate, user: User) -> ListItem:
        """Add a video to a list (requires can_add)."""
        list_obj = self._get_list(list_id)
        if not has_permission(self.db, list_obj, user.id, Capability.ADD):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have permission to add items to this list",
            )

        video_url = clean_video_url(data.video_url)
        platform = data.platform or detect_platform(video_url)

        item = ListItem(
            list_id=list_id,
            added_by_id=user.id,
            video_url=video_url,
            title=data.title,
            description=data.description,
            thumbnail_url=data.thumbnail_url,
            duration=data.duration,
            author_name=data.author_name,
            view_count=data.view_count,
            like_count=data.like_count,
            published_at=data.published_at,
            platform=VideoPlatform(platform).value,
            tags=list(data.tags or []),
            ratings=dict(DEFAULT_RATINGS),
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"User {user.id} added item {item.id} to list {list_id}")
        return item

    def get_items(self, list_id: int, user_id: int | None) -> list[ItemResponse]:
        """Items of a list, newest first, with the caller's watched flags.

        Missing lists and lists the caller cannot view both give a 404.
        """
        list_obj = self.db.get(List, list_id)
        if not list_obj or not has_permission(self.db, list_obj, user_id, Capability.VIEW):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")

        items = (
            self.db.query(ListItem)
            .filter(ListItem.list_id == list_id)
            .order_by(ListItem.created_at.desc(), ListItem.id.desc())
            .all()
        )

        watched: dict[int, bool] = {}
        if user_id is not None and items:
            rows = (
                self.db.query(UserWatchedItem.item_id, UserWatchedItem.watched)
                .filter(
                    UserWatchedItem.user_id == user_id,
                    UserWatchedItem.item_id.in_([item.id for item in items]),
                )
                .all()
            )
            watched = dict(rows)

        result = []
        for item in items:
            response = ItemResponse.model_validate(item)
            response.watched = watched.get(item.id, False)
            result.append(response)
        return result

    def update_item(self, item_id: int, data: ItemUpdate, user: User) -> ListItem:
        """Apply the fields present in the request; ratings merge per category."""
        item = self._get_item(item_id)
        self._require_edit_rights(item, user, "update")

        changes = data.model_dump(exclude_unset=True)

        if "title" in changes and changes["title"] is not None:
            item.title = changes["title"]
        if "description" in changes:
            item.description = changes["description"]
        if "tags" in changes:
            item.tags = list(changes["tags"] or [])

        rating_changes = {
            RATING_FIELDS[field]: value
            for field, value in changes.items()
            if field in RATING_FIELDS and value is not None
        }
        if rating_changes:
            ratings = dict(DEFAULT_RATINGS)
            ratings.update(item.ratings or {})
            ratings.update(rating_changes)
            item.ratings = ratings

        self.db.commit()
        self.db.refresh(item)
        return item

    def remove_item(self, item_id: int, user: User) -> None:
        """Delete an item and every viewer's watched record for it."""
        item = self._get_item(item_id)
        self._require_edit_rights(item, user, "delete")

        try:
            self.db.query(UserWatchedItem).filter(UserWatchedItem.item_id == item_id).delete()
            self.db.delete(item)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"User {user.id} removed item {item_id}")

    def toggle_watched(self, item_id: int, user: User) -> bool:
        """Flip the caller's watched flag; the first toggle marks it watched."""
        item = self._get_item(item_id)
        list_obj = self._get_list(item.list_id)
        if not has_permission(self.db, list_obj, user.id, Capability.VIEW):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have permission to update this item",
            )

        record = self._watched_record(user.id, item_id)
        if record is None:
            self.db.add(UserWatchedItem(user_id=user.id, item_id=item_id, watched=True))
            try:
                self.db.commit()
                return True
            except IntegrityError:
                # A concurrent toggle created the record first; flip that one
                self.db.rollback()
                record = self._watched_record(user.id, item_id)

        record.watched = not record.watched
        self.db.commit()
        return record.watched

    def _watched_record(self, user_id: int, item_id: int) -> UserWatchedItem | None:
        return (
            self.db.query(UserWatchedItem)
            .filter(UserWatchedItem.user_id == user_id, UserWatchedItem.item_id == item_id)
            .first()
        )
