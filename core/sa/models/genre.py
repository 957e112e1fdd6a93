# core/sa/models/genre.py
from sqlalchemy import Integer, String, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id

DEFAULT_GENRE_COLOR = "#6b7280"


class Genre(Base, TimestampMixin):
    __tablename__ = 'genre'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_GENRE_COLOR)
    # Active books referencing this genre, refreshed by the repositories
    book_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    book_genres = relationship('BookGenre', back_populates='genre', passive_deletes=True)

    __table_args__ = (
        Index('idx_genre_user_name', 'user_id', 'name'),
    )
