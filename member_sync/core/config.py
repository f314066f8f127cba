# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "mailchimp-member-sync")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./mailchimp_members.db")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    MAILCHIMP_API_KEY: str = os.getenv("MAILCHIMP_API_KEY", "")
    # Data-center prefix, e.g. "us21". Falls back to the API key suffix.
    MAILCHIMP_DC: str = os.getenv("MAILCHIMP_DC", "")
    MAILCHIMP_BASE_URL: str = os.getenv("MAILCHIMP_BASE_URL", "")
    MAILCHIMP_TIMEOUT: float = float(os.getenv("MAILCHIMP_TIMEOUT", "10.0"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def mailchimp_base_url(self) -> str:
        if self.MAILCHIMP_BASE_URL:
            return self.MAILCHIMP_BASE_URL.rstrip("/")
        dc = self.MAILCHIMP_DC
        if not dc and "-" in self.MAILCHIMP_API_KEY:
            dc = self.MAILCHIMP_API_KEY.rsplit("-", 1)[1]
        return f"https://{dc or 'us1'}.api.mailchimp.com/3.0"


settings = Settings()
