"""Application configuration."""

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Base settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file="leaderboard/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # Application
    APP_NAME: str = "Leaderboard API"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = False
    PORT: int = 8080

    # CORS - 단일 프론트엔드 origin만 허용
    FRONTEND_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json | simple

    # Database
    DATABASE_URL: str = "sqlite:///./leaderboard.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_BUSY_TIMEOUT_SECONDS: float = 30.0
    AUTO_CREATE_TABLES: bool = True

    # Claim rules
    CLAIM_MIN_POINTS: int = 1
    CLAIM_MAX_POINTS: int = 10
    CLAIM_MAX_RETRIES: int = 3
    TRANSACTION_TIMEOUT_SECONDS: float = 10.0  # 트랜잭션 최대 수명 (초)

    # Query
    HISTORY_LIMIT: int = 10

    @property
    def allowed_origins(self) -> List[str]:
        return [self.FRONTEND_URL] if self.FRONTEND_URL else ["*"]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


class DevelopmentSettings(Settings):
    DEBUG: bool = True


class StagingSettings(Settings):
    DEBUG: bool = False


class ProductionSettings(Settings):
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"


ENVIRONMENTS: dict[str, type[Settings]] = {
    "development": DevelopmentSettings,
    "staging": StagingSettings,
    "production": ProductionSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Return settings instance based on ENVIRONMENT variable."""

    env = os.getenv("ENVIRONMENT", "development").lower()
    settings_cls = ENVIRONMENTS.get(env, DevelopmentSettings)
    return settings_cls()
