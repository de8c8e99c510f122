"""Configuration settings for Joyxora."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./joyxora.db")
    DB_TIMEOUT_SECONDS: int = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

    # Credentials
    RESET_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))
    PASSWORD_MIN_LENGTH: int = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Email
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")
    SMTP_SERVER: str = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_TIMEOUT_SECONDS: int = int(os.getenv("SMTP_TIMEOUT_SECONDS", "30"))
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
    EMAIL_FROM_NAME: str = os.getenv("EMAIL_FROM_NAME", "Joyxora Team")
    NOTIFIER_WORKERS: int = int(os.getenv("NOTIFIER_WORKERS", "2"))

    # Application
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def __init__(self) -> None:
        if not self.JWT_SECRET_KEY:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)
            self._generated_secret = True
        else:
            self._generated_secret = False

    @property
    def smtp_configured(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASS)

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self._generated_secret:
            warnings.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.smtp_configured:
            warnings.append("EMAIL_USER/EMAIL_PASS not set - emails will be written to the log instead of sent")
        if self.PASSWORD_MIN_LENGTH < 8:
            warnings.append(f"PASSWORD_MIN_LENGTH={self.PASSWORD_MIN_LENGTH} is below the recommended 8")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
