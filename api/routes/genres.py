# api/routes/genres.py
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.library import Genre
from core.sa.database import get_db
from core.sa.repositories import GenreRepository
from core.schemas import GenreCreate, GenreUpdate
from core.utils.colors import get_contrast_color, get_next_available_color

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/genres", tags=["genres"])


def _genre_response(genre) -> Genre:
    return Genre.model_validate(genre).model_copy(update={"text_color": get_contrast_color(genre.color)})


@router.get("", response_model=List[Genre])
def list_genres(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return [_genre_response(genre) for genre in GenreRepository(db).list_genres(user_id)]


@router.post("", response_model=Genre, status_code=201)
def create_genre(
    genre: GenreCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Create a genre. Without a colour, the next unused palette colour is picked."""
    repo = GenreRepository(db)
    color = genre.color or get_next_available_color(g.color for g in repo.list_genres(user_id))
    try:
        created = repo.create_genre(user_id, genre.name, color)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _genre_response(created)


@router.get("/{genre_id}", response_model=Genre)
def get_genre(genre_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    genre = GenreRepository(db).get_genre(user_id, genre_id)
    if not genre:
        raise HTTPException(status_code=404, detail="Genre not found")
    return _genre_response(genre)


@router.patch("/{genre_id}", response_model=Genre)
def update_genre(
    genre_id: str,
    update: GenreUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        genre = GenreRepository(db).update_genre(user_id, genre_id, update.changes())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not genre:
        raise HTTPException(status_code=404, detail="Genre not found")
    return _genre_response(genre)


@router.delete("/{genre_id}")
def delete_genre(genre_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Delete a genre and remove it from every book that used it"""
    if not GenreRepository(db).delete_genre(user_id, genre_id):
        raise HTTPException(status_code=404, detail="Genre not found")
    logger.info(f"Deleted genre {genre_id} for user {user_id}")
    return {"message": "Genre deleted"}
