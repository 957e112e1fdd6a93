# core/sa/models/widget.py
from datetime import datetime
from sqlalchemy import String, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, UTCDateTime, utcnow


class WidgetSettings(Base):
    """Per-user dashboard layout document"""
    __tablename__ = 'widget_settings'

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    widgets: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
