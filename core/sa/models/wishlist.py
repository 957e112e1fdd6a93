# core/sa/models/wishlist.py
from enum import Enum
from sqlalchemy import String, Integer, Text, Index, JSON
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin, new_id


class WishlistPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WishlistItem(Base, TimestampMixin):
    """Books that users want to acquire."""
    __tablename__ = 'wishlist_item'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(200), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(13), nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    covers: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(200), nullable=True)
    published_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    priority: Mapped[str | None] = mapped_column(String(10), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index('idx_wishlist_user_created', 'user_id', 'created_at'),
    )
