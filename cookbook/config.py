"""
Application configuration using pydantic-settings.

Values come from environment variables (or a local .env file):
  - DATABASE_URL
  - JWT_SECRET
  - JWT_ALGORITHM
  - JWT_EXPIRES_MINUTES
  - ENVIRONMENT (development | production)
  - DEBUG
  - LOG_LEVEL
  - CORS_ORIGINS
"""
from __future__ import annotations

import logging
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-only-insecure-secret-change-me-before-deploying"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./cookbook.db"

    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    # one day
    jwt_expires_minutes: int = Field(default=60 * 24, gt=0)

    environment: str = "development"
    # include stack traces in 500 bodies
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @field_validator("environment")
    @classmethod
    def check_environment(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("development", "production"):
            raise ValueError("environment must be development or production")
        return v

    def model_post_init(self, __context) -> None:
        if self.jwt_secret == DEV_JWT_SECRET:
            if self.environment == "production":
                raise ValueError("JWT_SECRET must be set in production")
            logger.warning(
                "JWT_SECRET not set; using the development secret. "
                "Tokens issued now are not safe outside local development."
            )


settings = Settings()
