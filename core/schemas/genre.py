# core/schemas/genre.py
import re
from typing import Optional

from pydantic import BaseModel, field_validator

from core.schemas.common import max_length, required_text

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class GenreCreate(BaseModel):
    name: str
    color: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value):
        return required_text(value, "Name is required")

    @field_validator("name")
    @classmethod
    def _check_name_length(cls, value):
        return max_length(value, 50, "Name must be 50 characters or less")

    @field_validator("color")
    @classmethod
    def _check_color(cls, value):
        if value is not None and not HEX_COLOR.match(value):
            raise ValueError("Invalid colour format (use #RRGGBB)")
        return value


class GenreUpdate(GenreCreate):
    name: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
