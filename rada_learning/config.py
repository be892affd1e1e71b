"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    DATABASE_URL: str = "sqlite:///./rada_learning.db"
    DATABASE_TIMEOUT_SECONDS: float = 5.0

    # API (constants, not from env)
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Rada Learning API"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Event handling
    LEARNER_LOCK_TIMEOUT_SECONDS: float = 10.0
    STORAGE_RETRY_ATTEMPTS: int = 3
    STORAGE_RETRY_BACKOFF_SECONDS: float = 0.05

    # Progression
    XP_PER_LEVEL: int = 100
    ACTIVITY_WINDOW_DAYS: int = 7

    @field_validator(
        "DATABASE_TIMEOUT_SECONDS",
        "LEARNER_LOCK_TIMEOUT_SECONDS",
        "STORAGE_RETRY_ATTEMPTS",
        "XP_PER_LEVEL",
        "ACTIVITY_WINDOW_DAYS",
        mode="after",
    )
    @classmethod
    def must_be_positive(cls, value: float) -> float:
        """Reject zero and negative limits."""
        if value <= 0:
            msg = "value must be positive"
            raise ValueError(msg)
        return value

    @field_validator("STORAGE_RETRY_BACKOFF_SECONDS", mode="after")
    @classmethod
    def backoff_not_negative(cls, value: float) -> float:
        """Backoff may be zero (retry immediately) but never negative."""
        if value < 0:
            msg = "STORAGE_RETRY_BACKOFF_SECONDS cannot be negative"
            raise ValueError(msg)
        return value


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
