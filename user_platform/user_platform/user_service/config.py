"""
Configuration management for the user service
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """User service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Token signing key, no default: the service must not start without one
    SECRET_KEY: SecretStr
    TOKEN_TTL_MINUTES: Optional[int] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Password hashing
    HASH_MAX_CONCURRENCY: int = 4
    ARGON2_TIME_COST: Optional[int] = None
    ARGON2_MEMORY_COST: Optional[int] = None
    ARGON2_PARALLELISM: Optional[int] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
