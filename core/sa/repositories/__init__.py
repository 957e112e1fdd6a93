# core/sa/repositories/__init__.py
from .book import BookRepository
from .genre import GenreRepository
from .series import SeriesRepository
from .wishlist import WishlistRepository
from .widget_settings import WidgetSettingsRepository

__all__ = [
    'BookRepository',
    'GenreRepository',
    'SeriesRepository',
    'WishlistRepository',
    'WidgetSettingsRepository',
]
