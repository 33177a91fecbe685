"""
Application configuration management.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    PROJECT_NAME: str = "ProjectIT"
    API_V1_STR: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    ALLOWED_HOSTS: List[str] = ["*"]
    APP_NAME: str = "ProjectIT"
    APP_BASE_URL: str = "http://localhost:5173"

    # Database
    DATABASE_URL: str = "sqlite:///./projectit.db"

    # Redis (Celery broker)
    REDIS_URL: str = "redis://localhost:6379/0"

    # HaloPSA
    HALOPSA_WEBHOOK_SECRET: Optional[str] = None

    # Email (Resend)
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com"
    RESEND_FROM_EMAIL: str = "noreply@projectit.app"
    RESEND_FROM_NAME: str = "ProjectIT"

    # Outbound HTTP
    OUTBOUND_TIMEOUT_SECONDS: float = 30.0

    # Scheduled jobs
    REMINDER_SWEEP_CRON_HOUR: int = 7

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
