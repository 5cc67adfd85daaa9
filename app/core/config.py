# app/core/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Expense Share API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./expense_share.db"

    # JWT / Security Configuration
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    JWT_AUDIENCE: str = "fastapi-users:auth"

    # Session cookie used by the browser login flow
    SESSION_COOKIE_NAME: str = "expense_share_session"
    SESSION_MAX_AGE_SECONDS: int = 14 * 24 * 60 * 60

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running against SQLite (local dev and tests)"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
