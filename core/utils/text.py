# core/utils/text.py
import re
import unicodedata

_WHITESPACE = re.compile(r'\s+')


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(' ', value).strip()


def normalize_key(value: str) -> str:
    """Lowercased, whitespace-collapsed form used for picker matching"""
    return collapse_whitespace(value.lower())


def normalize_genre_name(name: str) -> str:
    return normalize_key(name)


def normalize_series_name(name: str) -> str:
    """Lowercase, drop a leading "The", collapse whitespace"""
    return collapse_whitespace(re.sub(r'^the\s+', '', name.lower().strip()))


def normalize_author(name: str) -> str:
    """Lowercase, drop . , - ' and collapse whitespace"""
    return collapse_whitespace(re.sub(r"[.,\-']", '', name.lower()))


def normalize_text(text: str) -> str:
    """Lowercase and strip diacritics for search comparison"""
    decomposed = unicodedata.normalize('NFD', text.lower())
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch)).strip()
