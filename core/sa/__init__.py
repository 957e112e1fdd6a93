# core/sa/__init__.py
from .database import Database, get_database, get_db
from .models import (
    Base, Book, BookGenre, BookRead, BookImage,
    Genre, Series, WishlistItem, WidgetSettings
)

__all__ = [
    'Database',
    'get_database',
    'get_db',
    'Base',
    'Book',
    'BookGenre',
    'BookRead',
    'BookImage',
    'Genre',
    'Series',
    'WishlistItem',
    'WidgetSettings',
]
