"""
Runtime settings for the edge authenticator.

Loaded with Pydantic Settings from EDGE_AUTH_* environment variables or a
.env file. Lambda@Edge does not support environment variables, so every
setting has a deploy-time default; the EDGE_AUTH_AES_SECRET_ID placeholder is
substituted into the bundle during deployment.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.entities.token import Scheme


class Settings(BaseSettings):
    """
    Settings loaded from environment variables (prefix EDGE_AUTH_) or .env.

    A bad value fails at load time with a ValidationError naming the field.
    """

    model_config = SettingsConfigDict(
        env_prefix="EDGE_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Secret sources
    hmac_secret: str = "my-secret-key-2024"
    hmac_secret_id: Optional[str] = None  # set to read secretKey from Secrets Manager
    aes_secret_id: str = "SECRET_NAME_PLACEHOLDER"
    secrets_region: str = "us-east-1"

    # Validation policy
    secret_cache_ttl: float = Field(default=300.0, gt=0)
    timestamp_tolerance: int = Field(default=300, ge=0)
    fetch_timeout: float = Field(default=2.0, gt=0)

    # Local gateway
    origin_url: str = "http://localhost:8080"
    scheme: Scheme = Scheme.SIGNED_TIMESTAMP

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    @field_validator("hmac_secret_id", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("aes_secret_id")
    @classmethod
    def _require_aes_secret_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must name the Secrets Manager secret holding aesKey")
        return value


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process (one Lambda container)."""
    return Settings()
