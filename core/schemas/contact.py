# core/schemas/contact.py
from typing import Literal

from pydantic import BaseModel, EmailStr, field_validator

from core.schemas.common import max_length, required_text

SUBJECT_LABELS = {
    "general": "General Enquiry",
    "bug": "Bug Report",
    "feature": "Feature Request",
    "account": "Account Issue",
}


class ContactForm(BaseModel):
    name: str
    email: EmailStr
    subject: Literal["general", "bug", "feature", "account"] = "general"
    message: str

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        return required_text(value, "Name is required")

    @field_validator("name")
    @classmethod
    def _name_length(cls, value):
        return max_length(value, 100, "Name must be 100 characters or less")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Valid email is required")
        return value.strip()

    @field_validator("subject", mode="before")
    @classmethod
    def _default_subject(cls, value):
        return value or "general"

    @field_validator("message")
    @classmethod
    def _message(cls, value):
        if len(value) < 10:
            raise ValueError("Message must be at least 10 characters")
        return max_length(value, 5000, "Message must be 5000 characters or less")

    @property
    def subject_label(self) -> str:
        return SUBJECT_LABELS[self.subject]
