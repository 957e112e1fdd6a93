# core/utils/library_health.py
"""
Library health analysis: which active books are missing metadata, how
complete the library is overall, and how many gaps a metadata lookup could
fill (books that have an ISBN).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from core.utils.reading import read_value


@dataclass(frozen=True)
class HealthField:
    weight: int
    label: str
    icon: str


# ISBN is tracked but carries no weight in the completeness score
HEALTH_FIELDS: Dict[str, HealthField] = {
    "cover_image_url": HealthField(2, "Cover", "image"),
    "genres": HealthField(2, "Genres", "tags"),
    "page_count": HealthField(1, "Pages", "hash"),
    "physical_format": HealthField(1, "Format", "book-open"),
    "publisher": HealthField(1, "Publisher", "building"),
    "published_date": HealthField(1, "Date", "calendar"),
    "isbn": HealthField(0, "ISBN", "barcode"),
}

# Issue bucket -> field it tracks
ISSUE_FIELDS: Dict[str, str] = {
    "missing_cover": "cover_image_url",
    "missing_genres": "genres",
    "missing_page_count": "page_count",
    "missing_format": "physical_format",
    "missing_publisher": "publisher",
    "missing_published_date": "published_date",
    "missing_isbn": "isbn",
}


@dataclass
class HealthReport:
    total_books: int
    completeness_score: int
    total_issues: int
    fixable_books: int
    issues: Dict[str, List[Any]] = field(default_factory=dict)


@dataclass
class BookIssues:
    book: Any
    missing: List[HealthField]


def has_field_value(book: Any, field_name: str) -> bool:
    value = read_value(book, field_name)
    if field_name == "genres":
        return isinstance(value, (list, tuple)) and len(value) > 0
    return bool(value)


def get_missing_fields(book: Any) -> List[str]:
    return [name for name in HEALTH_FIELDS if not has_field_value(book, name)]


def calculate_book_completeness(book: Any) -> int:
    """Weighted share (0-100) of scored fields that are filled in"""
    score = 0
    total_weight = 0
    for name, config in HEALTH_FIELDS.items():
        if config.weight > 0:
            total_weight += config.weight
            if has_field_value(book, name):
                score += config.weight
    if total_weight == 0:
        return 100
    return round(score / total_weight * 100)


def calculate_library_completeness(books: Sequence[Any]) -> int:
    """Average book completeness; never reports 100 while any book has gaps"""
    if not books:
        return 100

    total = 0
    incomplete = False
    for book in books:
        book_score = calculate_book_completeness(book)
        total += book_score
        if book_score < 100:
            incomplete = True

    score = round(total / len(books))
    if incomplete and score == 100:
        return 99
    return score


def analyze_library_health(books: Sequence[Any]) -> HealthReport:
    active = [book for book in books if not read_value(book, "deleted_at")]
    issues: Dict[str, List[Any]] = {bucket: [] for bucket in ISSUE_FIELDS}

    for book in active:
        for bucket, field_name in ISSUE_FIELDS.items():
            if not has_field_value(book, field_name):
                issues[bucket].append(book)

    total_issues = sum(len(issues[bucket]) for bucket in ISSUE_FIELDS if bucket != "missing_isbn")
    fixable = [
        book for book in active
        if read_value(book, "isbn")
        and any(HEALTH_FIELDS[name].weight > 0 for name in get_missing_fields(book))
    ]

    return HealthReport(
        total_books=len(active),
        completeness_score=calculate_library_completeness(active),
        total_issues=total_issues,
        fixable_books=len(fixable),
        issues=issues,
    )


def get_completeness_rating(score: int) -> Dict[str, str]:
    if score >= 90:
        return {"label": "Excellent", "colour": "green"}
    if score >= 70:
        return {"label": "Good", "colour": "green"}
    if score >= 50:
        return {"label": "Fair", "colour": "amber"}
    return {"label": "Needs Attention", "colour": "red"}


def get_books_with_issues(report: HealthReport) -> List[BookIssues]:
    """One entry per book with its missing fields, most gaps first"""
    by_book: Dict[Any, BookIssues] = {}
    for bucket, field_name in ISSUE_FIELDS.items():
        for book in report.issues.get(bucket, []):
            key = read_value(book, "id") or id(book)
            entry = by_book.setdefault(key, BookIssues(book=book, missing=[]))
            entry.missing.append(HEALTH_FIELDS[field_name])
    return sorted(by_book.values(), key=lambda entry: len(entry.missing), reverse=True)
