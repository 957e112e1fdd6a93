# core/schemas/auth.py
import re

from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator


def _clean_email(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Email is required")
    value = value.strip().lower()
    if len(value) > 254:
        raise ValueError("Email must be 254 characters or less")
    return value


def _strong_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(value) > 128:
        raise ValueError("Password must be 128 characters or less")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least one number")
    return value


def _not_empty(value: str, message: str) -> str:
    if not value:
        raise ValueError(message)
    return value


class LoginForm(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        return _clean_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value):
        return _not_empty(value, "Password is required")


class RegisterForm(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        return _clean_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value):
        return _strong_password(value)

    @field_validator("confirm_password")
    @classmethod
    def _confirm(cls, value, info: ValidationInfo):
        _not_empty(value, "Please confirm your password")
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords do not match")
        return value


class ChangePasswordForm(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("current_password")
    @classmethod
    def _current(cls, value):
        return _not_empty(value, "Current password is required")

    @field_validator("new_password")
    @classmethod
    def _new(cls, value, info: ValidationInfo):
        _strong_password(value)
        if value == info.data.get("current_password"):
            raise ValueError("New password must be different from current password")
        return value

    @field_validator("confirm_password")
    @classmethod
    def _confirm(cls, value, info: ValidationInfo):
        _not_empty(value, "Please confirm your new password")
        if "new_password" in info.data and value != info.data["new_password"]:
            raise ValueError("Passwords do not match")
        return value


class ResetPasswordForm(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value):
        return _clean_email(value)


class DeleteAccountForm(BaseModel):
    password: str
    confirm_text: str

    @field_validator("password")
    @classmethod
    def _password(cls, value):
        return _not_empty(value, "Password is required")

    @field_validator("confirm_text")
    @classmethod
    def _confirm_text(cls, value):
        if value != "DELETE":
            raise ValueError("Please type DELETE to confirm")
        return value
