from .common import field_errors, first_error
from .book import BookCreate, BookUpdate, QuickAddBook, BookReadIn, BookImageIn
from .wishlist import WishlistItemCreate, WishlistItemUpdate, QuickAddWishlistItem
from .genre import GenreCreate, GenreUpdate
from .series import SeriesCreate, SeriesUpdate, ExpectedBook
from .auth import LoginForm, RegisterForm, ChangePasswordForm, ResetPasswordForm, DeleteAccountForm
from .contact import ContactForm, SUBJECT_LABELS
from .widget import (
    WidgetConfig, WidgetConfigUpdate, WidgetOptions, WidgetReorder, DEFAULT_WIDGETS,
    WIDGET_REGISTRY, WIDGET_SETTINGS_VERSION, default_widgets, merge_with_defaults, enabled_widgets,
)

__all__ = [
    'field_errors',
    'first_error',
    'BookCreate',
    'BookUpdate',
    'QuickAddBook',
    'BookReadIn',
    'BookImageIn',
    'WishlistItemCreate',
    'WishlistItemUpdate',
    'QuickAddWishlistItem',
    'GenreCreate',
    'GenreUpdate',
    'SeriesCreate',
    'SeriesUpdate',
    'ExpectedBook',
    'LoginForm',
    'RegisterForm',
    'ChangePasswordForm',
    'ResetPasswordForm',
    'DeleteAccountForm',
    'ContactForm',
    'SUBJECT_LABELS',
    'WidgetConfig',
    'WidgetConfigUpdate',
    'WidgetOptions',
    'WidgetReorder',
    'DEFAULT_WIDGETS',
    'WIDGET_REGISTRY',
    'WIDGET_SETTINGS_VERSION',
    'default_widgets',
    'merge_with_defaults',
    'enabled_widgets',
]
