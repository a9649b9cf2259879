"""
Environment configuration for the dormitory management backend.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)


def _generate_secret() -> str:
    """Generate a default secret key if not provided"""
    import secrets
    import string

    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(32))


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    APP_NAME: str = Field(default="StaySync Dormitory Manager", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="1.0.0", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")
    APP_PUBLIC_URL: str = "http://localhost:8000"

    # Database - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "staysync"
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 10
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    # Cache
    CACHE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    DASHBOARD_CACHE_TTL: int = 120

    # Security
    JWT_SECRET_KEY: str = Field(default_factory=_generate_secret)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    PASSWORD_BCRYPT_ROUNDS: int = 12
    CRON_SECRET: Optional[str] = None
    BACKUP_API_KEY: Optional[str] = None

    # LINE Messaging API
    LINE_CHANNEL_ACCESS_TOKEN: Optional[str] = None
    LINE_CHANNEL_SECRET: Optional[str] = None
    LINE_API_BASE_URL: str = "https://api.line.me/v2/bot"
    LINE_REQUEST_TIMEOUT: float = 10.0
    OWNER_LINE_USER_ID: Optional[str] = None

    # File storage
    UPLOAD_DIR: str = "uploads"
    MAX_SLIP_SIZE: int = 5 * 1024 * 1024

    # Business rules
    DEFAULT_WATER_RATE: Decimal = Decimal("18")
    DEFAULT_ELECTRIC_RATE: Decimal = Decimal("7")
    DEFAULT_TRASH_FEE: Decimal = Decimal("30")
    CHECKOUT_GRACE_DAYS: int = 3
    OVERDUE_DUE_DAY: int = 5
    AUDIT_DEFAULT_LIMIT: int = 50
    AUDIT_MAX_LIMIT: int = 500

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list or a comma separated string"""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(allowed)}")
        return level

    @field_validator("CACHE_BACKEND")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        if v not in ("memory", "redis"):
            raise ValueError("CACHE_BACKEND must be 'memory' or 'redis'")
        return v

    @field_validator("OVERDUE_DUE_DAY")
    @classmethod
    def validate_due_day(cls, v: int) -> int:
        if not 1 <= v <= 28:
            raise ValueError("OVERDUE_DUE_DAY must be between 1 and 28")
        return v

    def get_database_url(self) -> str:
        """Return DATABASE_URL or build one from the individual components."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
