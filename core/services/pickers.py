# core/services/pickers.py
"""
Typeahead pickers for authors, genres, series and covers.

A Picker holds the candidate list built from the user's own data and the
transient input state (query, open flag, focused row, selection). Filtering
is local: a substring match against each candidate's normalised key. Typed
text reaches the parent through a Debouncer; picking an item reaches it
immediately.
"""
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.utils.debounce import DEFAULT_WAIT, Debouncer
from core.utils.text import collapse_whitespace, normalize_key

MAX_RESULTS = 20


@dataclass
class Candidate:
    value: Any
    label: str
    key: str
    count: int = 0


@dataclass
class PickerItem:
    value: Any
    label: str
    count: int = 0
    is_new: bool = False


def _candidate(value: Any, label: str, count: int = 0) -> Candidate:
    return Candidate(value=value, label=label, key=normalize_key(label), count=count)


def author_candidates(books: Iterable[Any]) -> List[Candidate]:
    """Authors used in the active collection, most used first.

    Spellings that differ only in case or spacing count as one author; the
    first spelling seen is the one shown.
    """
    counts: Counter = Counter()
    labels: Dict[str, str] = {}
    for book in books:
        if getattr(book, 'deleted_at', None) is not None:
            continue
        author = collapse_whitespace(getattr(book, 'author', None) or '')
        if not author:
            continue
        key = normalize_key(author)
        labels.setdefault(key, author)
        counts[key] += 1

    candidates = [_candidate(labels[key], labels[key], count) for key, count in counts.items()]
    return sorted(candidates, key=lambda c: (-c.count, c.label.casefold()))


def genre_candidates(genres: Iterable[Any]) -> List[Candidate]:
    candidates = [_candidate(genre.id, genre.name, genre.book_count or 0) for genre in genres]
    return sorted(candidates, key=lambda c: c.label.casefold())


def series_candidates(series: Iterable[Any], counts: Optional[Dict[str, int]] = None) -> List[Candidate]:
    counts = counts or {}
    candidates = [_candidate(s.id, s.name, counts.get(s.id, 0)) for s in series]
    return sorted(candidates, key=lambda c: c.label.casefold())


def cover_candidates(covers: Optional[Dict[str, str]], current: Optional[str] = None) -> List[Candidate]:
    """One entry per distinct cover URL, the current cover first"""
    candidates: List[Candidate] = []
    seen = set()
    if current:
        candidates.append(_candidate(current, 'current'))
        seen.add(current)
    for source, url in (covers or {}).items():
        if url and url not in seen:
            candidates.append(_candidate(url, source))
            seen.add(url)
    return candidates


class Picker:
    """Keyboard-driven typeahead over a fixed candidate list.

    In single mode `on_change` receives one value (or the typed text); in
    multi mode it receives the full list of selected values after every
    change. Free text that matches no candidate exactly is offered as a new
    value at the top of the list.
    """

    def __init__(self, candidates: List[Candidate], on_change: Callable[[Any], None],
                 multi: bool = False, selected: Optional[List[Any]] = None,
                 allow_new: bool = True, wait: float = DEFAULT_WAIT,
                 clock: Callable[[], float] = time.monotonic):
        self.candidates = candidates
        self.on_change = on_change
        self.multi = multi
        self.allow_new = allow_new
        self.selected: List[Any] = list(selected or [])
        self.query = ''
        self.is_open = False
        self.focused_index = -1
        self.debouncer = Debouncer(on_change, wait, clock)

    @property
    def items(self) -> List[PickerItem]:
        key = normalize_key(self.query)
        visible = [c for c in self.candidates if not (self.multi and c.value in self.selected)]
        matches = [c for c in visible if key in c.key][:MAX_RESULTS]
        items = [PickerItem(c.value, c.label, c.count) for c in matches]

        typed = collapse_whitespace(self.query)
        if self.allow_new and typed and not any(c.key == key for c in self.candidates):
            items.insert(0, PickerItem(typed, f'Use "{typed}"', is_new=True))
        return items

    def open(self) -> None:
        self.is_open = True

    def type(self, text: str) -> None:
        """Update the query; in single mode the text is also passed on, debounced"""
        self.query = text
        self.is_open = True
        self.focused_index = -1
        if not self.multi:
            self.debouncer.call(text)

    def poll(self) -> bool:
        return self.debouncer.poll()

    def select(self, item: PickerItem) -> None:
        self.debouncer.cancel()
        if self.multi:
            if item.value not in self.selected:
                self.selected.append(item.value)
            self.query = ''
            self.focused_index = -1
            self.on_change(list(self.selected))
        else:
            self.selected = [item.value]
            self.query = item.value if item.is_new else item.label
            self.close()
            self.on_change(item.value)

    def remove(self, value: Any) -> None:
        if value in self.selected:
            self.selected.remove(value)
            self.on_change(list(self.selected) if self.multi else None)

    def commit_typed(self) -> None:
        typed = collapse_whitespace(self.query)
        if not typed:
            self.close()
            return
        key = normalize_key(typed)
        existing = next((c for c in self.candidates if c.key == key), None)
        if existing:
            self.select(PickerItem(existing.value, existing.label, existing.count))
        elif self.allow_new:
            self.select(PickerItem(typed, typed, is_new=True))
        else:
            self.close()

    def close(self) -> None:
        self.is_open = False
        self.focused_index = -1

    def click_outside(self) -> None:
        self.close()

    def key(self, name: str) -> None:
        items = self.items
        if name == 'ArrowDown':
            self.is_open = True
            self.focused_index = min(self.focused_index + 1, len(items) - 1)
        elif name == 'ArrowUp':
            self.focused_index = max(self.focused_index - 1, -1)
        elif name == 'Enter':
            if 0 <= self.focused_index < len(items):
                self.select(items[self.focused_index])
            else:
                self.commit_typed()
        elif name == 'Escape':
            self.close()
        elif name == 'Tab':
            if self.query:
                self.commit_typed()
            self.close()
