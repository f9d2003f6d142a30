"""
Process settings loaded from environment variables.

Read once at process start and passed explicitly to the functions that need
them; no other module reads the environment.
"""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENGINE_ENDPOINT = "https://engine-graphql.apollographql.com/api/graphql"


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Schema registry
    ENGINE_API_KEY: Optional[str] = None
    APOLLO_ENGINE_ENDPOINT: str = DEFAULT_ENGINE_ENDPOINT

    # HTTP
    APOLLO_HTTP_TIMEOUT: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def credential_override(self) -> Optional[str]:
        """Engine key that wins over every configured one."""
        return self.ENGINE_API_KEY or None
