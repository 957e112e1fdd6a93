# api/routes/maintenance.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.routes.books import get_image_store
from api.schemas.dashboard import (
    HealthReportSchema, OrphanDeleteSchema, OrphanReportSchema, RecountResultSchema,
)
from core.sa.database import get_db
from core.sa.repositories import BookRepository
from core.services.maintenance_service import MaintenanceService
from core.utils.image import ImageStore
from core.utils.library_health import (
    ISSUE_FIELDS, analyze_library_health, calculate_book_completeness, get_books_with_issues,
    get_completeness_rating,
)

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


def get_maintenance_service(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
) -> MaintenanceService:
    return MaintenanceService(db, user_id, store)


@router.get("/health", response_model=HealthReportSchema)
def library_health(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Metadata completeness of the library and the books with gaps"""
    report = analyze_library_health(BookRepository(db).list_books(user_id))
    return {
        "total_books": report.total_books,
        "completeness_score": report.completeness_score,
        "rating": get_completeness_rating(report.completeness_score),
        "total_issues": report.total_issues,
        "fixable_books": report.fixable_books,
        "issue_counts": {bucket: len(report.issues[bucket]) for bucket in ISSUE_FIELDS},
        "books": [
            {
                "book": entry.book,
                "completeness": calculate_book_completeness(entry.book),
                "missing": [vars(field) for field in entry.missing],
            }
            for entry in get_books_with_issues(report)
        ],
    }


@router.post("/recount-genres", response_model=RecountResultSchema)
def recount_genres(service: MaintenanceService = Depends(get_maintenance_service)):
    """Correct genre book counts that have drifted from the books"""
    result = service.recount_genres()
    return {"updated": result.updated, "books_scanned": result.books_scanned, "message": result.message}


@router.get("/orphaned-images", response_model=OrphanReportSchema)
def find_orphaned_images(service: MaintenanceService = Depends(get_maintenance_service)):
    """Stored image files that no book refers to"""
    report = service.find_orphaned_images()
    return {
        "files": [vars(orphan) for orphan in report.files],
        "count": report.count,
        "total_size": report.total_size,
    }


@router.delete("/orphaned-images", response_model=OrphanDeleteSchema)
def delete_orphaned_images(service: MaintenanceService = Depends(get_maintenance_service)):
    deleted = service.delete_orphaned_images()
    return {"deleted": deleted, "message": f"Deleted {deleted} orphaned image(s)"}
