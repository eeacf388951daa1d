"""Configuration management for Health Links."""

import os
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings

DeploymentTier = Literal["dev", "prod"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = ConfigDict(
        env_file=".env" if os.getenv("ENVIRONMENT") != "test" else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow"
    )

    # Application
    app_name: str = "Health Links"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False, env="DEBUG")
    environment: str = Field(default="development", env="ENVIRONMENT")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # Server
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=8000, env="PORT")

    # Admin panel
    admin_password: Optional[str] = Field(default=None, env="ADMIN_PASSWORD")

    # Quota store
    quota_backend: Literal["upstash", "memory"] = Field(
        default="upstash", env="QUOTA_BACKEND"
    )
    upstash_redis_rest_url: Optional[str] = Field(
        default=None, env="UPSTASH_REDIS_REST_URL"
    )
    upstash_redis_rest_token: Optional[str] = Field(
        default=None, env="UPSTASH_REDIS_REST_TOKEN"
    )
    global_daily_cap: int = Field(
        default=500,
        env="GLOBAL_DAILY_CAP",
        description="Maximum metered generation calls per UTC+9 calendar day",
    )
    quota_ttl_margin_seconds: int = Field(default=120, env="QUOTA_TTL_MARGIN_SECONDS")
    quota_store_timeout_seconds: float = Field(
        default=10.0, env="QUOTA_STORE_TIMEOUT_SECONDS"
    )

    # Answer generation
    llm_provider: Literal["openai", "mock"] = Field(default="openai", env="LLM_PROVIDER")
    openai_api_key: Optional[str] = Field(default=None, env="OPENAI_API_KEY")
    model_name: str = Field(default="gpt-4o-mini", env="MODEL_NAME")
    generation_timeout_seconds: float = Field(
        default=30.0, env="GENERATION_TIMEOUT_SECONDS"
    )

    # CORS Configuration
    cors_allowed_origins: Optional[str] = Field(
        default=None,
        env="CORS_ALLOWED_ORIGINS",
        description="Comma-separated list of allowed CORS origins. Defaults to ['*'] in dev.",
    )

    # Feature Flags
    enable_metrics: bool = Field(default=False, env="ENABLE_METRICS")

    @field_validator("upstash_redis_rest_url", mode="before")
    @classmethod
    def validate_upstash_url(cls, v):
        if not v:
            return None
        return str(v).strip().rstrip("/") or None

    @field_validator("openai_api_key", mode="before")
    @classmethod
    def validate_openai_api_key(cls, v):
        if not v:
            return None
        key = str(v).strip()
        if not key.isascii() or not key.isprintable():
            raise ValueError("OPENAI_API_KEY contains non-ASCII or control characters")
        return key

    @field_validator("global_daily_cap")
    @classmethod
    def validate_global_daily_cap(cls, v):
        if v < 0:
            raise ValueError("GLOBAL_DAILY_CAP must not be negative")
        return v

    @property
    def deployment_tier(self) -> DeploymentTier:
        """Deployment criticality used by the quota fail-open/fail-closed policy."""
        return "prod" if self.environment == "production" else "dev"

    @property
    def quota_store_configured(self) -> bool:
        if self.quota_backend == "memory":
            return True
        return bool(self.upstash_redis_rest_url and self.upstash_redis_rest_token)

    def get_cors_origins(self) -> List[str]:
        """Parse CORS allowed origins from config."""
        if self.cors_allowed_origins:
            return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]
        # Default: allow all in development
        if self.environment != "production":
            return ["*"]
        return []


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
