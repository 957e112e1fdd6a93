# core/utils/isbn.py
import re
from typing import Optional

ISBN_PATTERN = re.compile(r'^(\d{10}|\d{9}X|\d{13})$')
_PREFIX = re.compile(r'^isbn[-:\s]*(10|13)?[-:\s]*', re.IGNORECASE)
_SEPARATORS = re.compile(r'[-\s]')


def normalize_isbn(value: Optional[str]) -> Optional[str]:
    """Strip hyphens and whitespace and upper-case a trailing check character.

    Returns None for empty input. Applying it twice gives the same result.
    """
    if value is None:
        return None
    cleaned = _SEPARATORS.sub('', value).upper()
    return cleaned or None


def is_valid_isbn(value: Optional[str]) -> bool:
    """True for a normalized ISBN-10 (optionally ending in X) or ISBN-13"""
    return bool(value) and ISBN_PATTERN.match(value) is not None


def clean_isbn(value: Optional[str]) -> str:
    """Remove an "ISBN:"/"ISBN-13:" style prefix, dashes and spaces"""
    if not value:
        return ''
    return _SEPARATORS.sub('', _PREFIX.sub('', value.strip()))


def is_isbn(value: Optional[str]) -> bool:
    """Whether free text (e.g. a search box entry) looks like an ISBN"""
    cleaned = clean_isbn(value)
    return bool(re.fullmatch(r'\d{10}|\d{13}', cleaned))
