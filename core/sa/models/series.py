# core/sa/models/series.py
from sqlalchemy import String, Integer, Text, Index, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id


class Series(Base, TimestampMixin):
    __tablename__ = 'series'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_books: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Planned entries: [{"title", "isbn", "position", "source"}]
    expected_books: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Relationships
    books = relationship('Book', back_populates='series')

    __table_args__ = (
        Index('idx_series_user_name', 'user_id', 'name'),
    )
