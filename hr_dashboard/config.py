"""Application configuration via environment variables."""

import json
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/hr_dashboard.db"
    DATABASE_URL_SYNC: str = "sqlite:///./data/hr_dashboard.db"

    # HR admins: comma-separated allow-list of emails
    HR_ADMIN_EMAILS: str = ""

    # Auth: JWT_SECRET MUST be set via environment / .env (no default)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 24
    ALLOWED_DOMAIN: str = ""

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:5173"]'
    RATE_LIMIT_WRITES: str = "30/minute"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:5173"]

    @property
    def hr_admin_emails_list(self) -> List[str]:
        """Normalised (lower-cased, trimmed) admin emails; blanks dropped."""
        return [
            email.strip().lower()
            for email in self.HR_ADMIN_EMAILS.split(",")
            if email.strip()
        ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
