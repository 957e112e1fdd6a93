# core/sa/models/__init__.py
from .base import Base, TimestampMixin, UTCDateTime, utcnow, new_id
from .genre import Genre, DEFAULT_GENRE_COLOR
from .series import Series
from .book import Book, BookGenre, BookRead, BookImage, PhysicalFormat
from .wishlist import WishlistItem, WishlistPriority
from .widget import WidgetSettings

__all__ = [
    'Base',
    'TimestampMixin',
    'UTCDateTime',
    'utcnow',
    'new_id',
    'Book',
    'BookGenre',
    'BookRead',
    'BookImage',
    'PhysicalFormat',
    'Genre',
    'DEFAULT_GENRE_COLOR',
    'Series',
    'WishlistItem',
    'WishlistPriority',
    'WidgetSettings',
]
