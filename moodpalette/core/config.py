"""Application configuration using Pydantic settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str):
    """Simple enum-like helper for environment tagging."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Mood Palette Service", description="Service name")
    api_prefix: str = Field(default="/api", description="Base API prefix")
    environment: str = Field(default=Environment.DEVELOPMENT, description="Runtime environment tag")
    log_level: str = Field(default="INFO", description="Root logging level")
    redis_url: str | None = Field(
        default=None, description="Redis connection URI (unset to use the in-process cache)"
    )
    cache_ttl_seconds: int = Field(default=3600, ge=1, description="Lifetime of cached generations")
    cache_timeout: float = Field(
        default=1.0, gt=0, description="Deadline in seconds for a single cache operation"
    )
    gemini_api_key: str | None = Field(default=None, description="Credential for the text generation service")
    gemini_api_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API",
    )
    text_model: str = Field(default="gemini-1.5-flash", description="Model used for prompt requests")
    image_model: str = Field(default="gemini-1.5-flash-8b", description="Model used for image requests")
    model_call_timeout: float = Field(
        default=20.0, gt=0, description="Deadline in seconds for a single model call"
    )
    request_deadline: float = Field(
        default=60.0, gt=0, description="Deadline in seconds for the palette fan-out of one request"
    )
    retry_max_attempts: int = Field(default=3, ge=1, description="Model calls per step before falling back")
    retry_base_delay: float = Field(default=1.0, ge=0, description="Initial backoff delay in seconds")
    concurrency_limit: int = Field(
        default=2, ge=1, le=5, description="Concurrent psychology generations per request"
    )
    default_palette_size: int = Field(
        default=5, ge=1, le=10, description="Colors per palette when the request omits a size"
    )
    serve_fallback_without_credentials: bool = Field(
        default=False,
        description="Serve fallback palettes with a warning instead of failing when no API key is set",
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings instance."""
    return AppSettings()
