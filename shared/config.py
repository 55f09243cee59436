"""
Shared configuration management for the registry submission client.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REGISTRY_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REGISTRY_",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class SubmissionConfig(BaseConfig):
    """Settings consumed by the submission pipeline."""

    # Registry endpoint
    base_url: str = Field(default=DEFAULT_REGISTRY_URL)
    auth_token: str = Field(default="")

    # Rate limiting
    request_limit: int = Field(default=2)
    window_seconds: float = Field(default=1.0)

    # Transport
    connect_timeout: float = Field(default=30.0)
    read_timeout: float = Field(default=30.0)


def get_config(**overrides) -> SubmissionConfig:
    """Get configuration, with explicit values taking precedence over the environment."""
    return SubmissionConfig(**overrides)
