from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path

# Package root (backend/kharcha)
BASE_DIR = Path(__file__).resolve().parent.parent


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Kharcha"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./kharcha.db"
    DB_ECHO: bool = False

    # ==========================================
    # Redis / Celery
    # ==========================================
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TASK_TIME_LIMIT: int = 600  # 10 minutes
    CELERY_RESULT_EXPIRES: int = 86400  # 24 hours

    # ==========================================
    # Reminders
    # ==========================================
    REMINDER_HOUR_UTC: int = 9
    REMINDER_MINUTE_UTC: int = 0

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 43200  # 30 days
    SIGN_IN_LINK_MAX_AGE_HOURS: int = 24
    SIGN_IN_PROVIDER: str = "resend"
    SESSION_COOKIE_NAME: str = "kharcha_session"
    SESSION_COOKIE_SECURE: bool = False

    # ==========================================
    # Email
    # ==========================================
    EMAIL_PROVIDER: str = "resend"  # "resend" or "smtp"
    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "noreply@kharcha.app"
    EMAIL_FROM_NAME: str = "Kharcha"
    EMAIL_TIMEOUT_SECONDS: float = 15.0
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""

    # ==========================================
    # Frontend
    # ==========================================
    FRONTEND_URL: str = "http://localhost:8000"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:8000,http://127.0.0.1:8000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URL: str = "memory://"
    SIGN_IN_RATE_LIMIT: str = "5/minute"

    # ==========================================
    # Preferences
    # ==========================================
    DEFAULT_CURRENCY: str = "INR"
    DEFAULT_LANGUAGE: str = "en"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/kharcha.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def BASE_DIR(self) -> Path:
        return BASE_DIR

    @property
    def TEMPLATES_DIR(self) -> Path:
        return BASE_DIR / "web" / "templates"

    @property
    def STATIC_DIR(self) -> Path:
        return BASE_DIR / "web" / "static"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Create settings instance
settings = Settings()
