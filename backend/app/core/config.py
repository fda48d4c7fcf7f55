"""Application configuration."""

import os
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Patrimoine"
    APP_ENV: str = "development"
    DEBUG: bool = False  # Secure default: disabled
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    SLOW_REQUEST_MS: int = 1000

    # Security - No default values for sensitive keys (must be in .env)
    SECRET_KEY: str  # Required - no default
    ALGORITHM: str = "HS256"
    AUTH_PASSWORD: str = ""
    AUTH_TOKEN_EXPIRE_DAYS: int = 30
    AUTH_COOKIE_NAME: str = "auth_token"
    CRON_SECRET: str = ""

    # Database - Credentials must come from environment
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "patrimoine"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "patrimoine"

    # Database pool configuration
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Ensure SECRET_KEY is secure."""
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters")
        if v in ["your-secret-key-change-in-production", "changeme", "secret"]:
            raise ValueError("SECRET_KEY must not be a default/weak value")
        return v

    @property
    def DATABASE_URL(self) -> str:
        """Build async database URL. Uses DATABASE_URL env var if set."""
        external = os.environ.get("DATABASE_URL", "")
        if external:
            if external.startswith("postgresql://"):
                return external.replace("postgresql://", "postgresql+asyncpg://", 1)
            return external
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    @property
    def REDIS_URL(self) -> str:
        """Build Redis URL. Uses REDIS_URL env var if set."""
        external = os.environ.get("REDIS_URL", "")
        if external:
            return external
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/0"

    # Rate limiting storage (memory:// is accepted for single-process deployments)
    RATE_LIMIT_STORAGE_URI: str = ""

    @property
    def rate_limit_storage(self) -> str:
        return self.RATE_LIMIT_STORAGE_URI or self.REDIS_URL

    # CORS
    # Override with comma-separated env var: CORS_ORIGINS=https://mysite.com,https://www.mysite.com
    CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,http://127.0.0.1:3000"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    CORS_ALLOWED_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_ALLOWED_HEADERS: List[str] = [
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
        "X-Cron-Secret",
    ]

    # Portfolio owners
    PERSON_1: str = "Person 1"
    PERSON_2: str = "Person 2"

    # Projections
    CONTRIBUTION_GROWTH_RATE: float = 1.0  # % per year applied to contributions
    DEFAULT_PROJECTION_YEARS: int = 10
    MAX_PROJECTION_YEARS: int = 50

    # Quote provider
    QUOTE_BATCH_SIZE: int = 10
    QUOTE_BATCH_DELAY_SECONDS: float = 0.5
    QUOTE_CACHE_TTL: int = 300
    QUOTE_HTTP_TIMEOUT: float = 15.0

    @property
    def owners(self) -> List[str]:
        return [self.PERSON_1, self.PERSON_2]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production" and not self.DEBUG

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
