# core/sa/models/book.py
from datetime import datetime
from enum import Enum
from typing import List
from sqlalchemy import String, Integer, Float, Boolean, Text, ForeignKey, Index, JSON
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, UTCDateTime, new_id, utcnow
from core.utils.reading import get_reading_status, ReadingStatus


class PhysicalFormat(str, Enum):
    PAPERBACK = "Paperback"
    HARDCOVER = "Hardcover"
    MASS_MARKET_PAPERBACK = "Mass Market Paperback"
    TRADE_PAPERBACK = "Trade Paperback"
    LIBRARY_BINDING = "Library Binding"
    SPIRAL_BOUND = "Spiral-bound"
    AUDIO_CD = "Audio CD"
    EBOOK = "Ebook"


class BookGenre(Base):
    __tablename__ = 'book_genre'

    book_id: Mapped[str] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), primary_key=True)
    genre_id: Mapped[str] = mapped_column(ForeignKey('genre.id', ondelete='CASCADE'), primary_key=True)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    book = relationship('Book', back_populates='book_genres')
    genre = relationship('Genre', back_populates='book_genres')


class BookRead(Base):
    """One read-through of a book. The last entry is the only one allowed to be in progress."""
    __tablename__ = 'book_read'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[str] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    book = relationship('Book', back_populates='reads')


class BookImage(Base):
    __tablename__ = 'book_image'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    book_id: Mapped[str] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    caption: Mapped[str | None] = mapped_column(String(500), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    size_bytes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)

    book = relationship('Book', back_populates='images')


class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(200), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(13), nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    covers: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(200), nullable=True)
    published_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    physical_format: Mapped[str | None] = mapped_column(String(50), nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    series_id: Mapped[str | None] = mapped_column(ForeignKey('series.id', ondelete='SET NULL'), nullable=True)
    series_position: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    # Relationships
    book_genres = relationship(
        'BookGenre',
        back_populates='book',
        order_by='BookGenre.position',
        cascade='all, delete-orphan',
    )
    reads = relationship(
        'BookRead',
        back_populates='book',
        order_by='BookRead.position',
        collection_class=ordering_list('position'),
        cascade='all, delete-orphan',
    )
    images = relationship(
        'BookImage',
        back_populates='book',
        order_by='BookImage.position',
        collection_class=ordering_list('position'),
        cascade='all, delete-orphan',
    )
    series = relationship('Series', back_populates='books')

    __table_args__ = (
        Index('idx_book_user_deleted', 'user_id', 'deleted_at'),
        Index('idx_book_user_series', 'user_id', 'series_id'),
        Index('idx_book_isbn', 'isbn'),
    )

    @property
    def genres(self) -> List[str]:
        """Genre ids in their stored order"""
        return [bg.genre_id for bg in self.book_genres]

    @property
    def status(self) -> ReadingStatus:
        return get_reading_status(self.reads)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def primary_image(self) -> BookImage | None:
        return next((image for image in self.images if image.is_primary), None)
