"""
Application Configuration

Centralized configuration management using Pydantic settings.
Loads from environment variables with fallback to .env file.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Note: get_settings() is cached, so tests that need different values
    must set the environment before the package is imported (see
    tests/conftest.py) or call get_settings.cache_clear().
    """

    # Database settings
    DATABASE_URL: str = "postgresql://localhost/shipyard_dev"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40

    # Session tokens
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 60 * 24 * 7
    SESSION_COOKIE_NAME: str = "shipyard_session"
    SESSION_COOKIE_SECURE: bool = False

    # Password hashing cost. 12 is the bcrypt default; tests lower it.
    BCRYPT_ROUNDS: int = 12

    # Two factor auth
    TOTP_ISSUER: str = "Shipyard"

    # Password resets
    # TODO: Move delivery to a transactional email provider; links are only logged today.
    PASSWORD_RESET_EXPIRE_HOURS: int = 24
    FRONTEND_URL: str = "http://localhost:3000"

    # Redis for rate limiting
    REDIS_URL: str = "redis://localhost:6379/0"

    # Application settings
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_BURST: int = 10
    # Peer addresses whose X-Forwarded-For header is believed, as a JSON list
    TRUSTED_PROXIES: List[str] = []

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only instantiate settings once.
    """
    return Settings()
