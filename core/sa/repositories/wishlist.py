# core/sa/repositories/wishlist.py
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from core.sa.models import WishlistItem, utcnow
from core.utils.book_filters import sort_wishlist

ITEM_FIELDS = (
    'title', 'author', 'isbn', 'cover_image_url', 'covers', 'publisher',
    'published_date', 'page_count', 'priority', 'notes',
)


class WishlistRepository:
    def __init__(self, session: Session):
        self.session = session

    def _query(self, user_id: str):
        return self.session.query(WishlistItem).filter(WishlistItem.user_id == user_id)

    def list_wishlist(self, user_id: str) -> List[WishlistItem]:
        """Items by priority (high, medium, low, unset), newest first within a priority"""
        items = self._query(user_id).order_by(WishlistItem.created_at.desc()).all()
        return sort_wishlist(items, "priority")

    def list_recent(self, user_id: str, count: int = 5) -> List[WishlistItem]:
        return self._query(user_id).order_by(WishlistItem.created_at.desc()).limit(count).all()

    def get_item(self, user_id: str, item_id: str) -> Optional[WishlistItem]:
        return self._query(user_id).filter(WishlistItem.id == item_id).first()

    def add_item(self, user_id: str, data: Dict[str, Any]) -> WishlistItem:
        item = WishlistItem(user_id=user_id, **{field: data.get(field) for field in ITEM_FIELDS})
        self.session.add(item)
        self.session.commit()
        return item

    def update_item(self, user_id: str, item_id: str, changes: Dict[str, Any]) -> Optional[WishlistItem]:
        item = self.get_item(user_id, item_id)
        if not item:
            return None
        for field in ITEM_FIELDS:
            if field in changes:
                setattr(item, field, changes[field])
        item.updated_at = utcnow()
        self.session.commit()
        return item

    def delete_item(self, user_id: str, item_id: str) -> bool:
        result = self._query(user_id).filter(WishlistItem.id == item_id).delete()
        self.session.commit()
        return result > 0

    def count_items(self, user_id: str) -> int:
        return self._query(user_id).count()
