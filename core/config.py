# core/config.py
"""
Application settings read from the environment.
"""
import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    """Runtime configuration for the API, CLI and services"""
    database_url: str = "sqlite:///books.db"
    session_secret: str = "change-me"
    app_env: str = "development"
    resend_api_key: str | None = None
    email_from: str = "Book Assembly <hello@bookassembly.co.uk>"
    support_email: str = "hello@bookassembly.co.uk"
    media_dir: str = "data/media"
    preferences_path: str = "data/preferences.json"
    bin_retention_days: int = 30
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            session_secret=os.getenv("SESSION_SECRET", defaults.session_secret),
            app_env=os.getenv("APP_ENV", defaults.app_env),
            resend_api_key=os.getenv("RESEND_API_KEY") or None,
            email_from=os.getenv("EMAIL_FROM", defaults.email_from),
            support_email=os.getenv("SUPPORT_EMAIL", defaults.support_email),
            media_dir=os.getenv("MEDIA_DIR", defaults.media_dir),
            preferences_path=os.getenv("PREFERENCES_PATH", defaults.preferences_path),
            bin_retention_days=int(os.getenv("BIN_RETENTION_DAYS", defaults.bin_retention_days)),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "")) or defaults.cors_origins,
        )


@lru_cache
def get_settings() -> Settings:
    """Settings for the current process, read once"""
    return Settings.from_env()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the API and CLI entry points"""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
