"""
Aggregated application settings.

Dependencies: all cardbase.configs groups
System role: Single configuration object shared by the API, services and scripts
"""

from functools import lru_cache

from pydantic import Field

from cardbase.configs.auth import AuthSettings
from cardbase.configs.base import BaseSettings
from cardbase.configs.cards import CardSettings
from cardbase.configs.database import DatabaseSettings
from cardbase.configs.embedding import EmbeddingSettings
from cardbase.configs.vector_store import VectorStoreSettings
from cardbase.configs.worker_pool import WorkerPoolSettings


class Settings(BaseSettings):
    """All settings groups, each loaded from its own env prefix."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    cards: CardSettings = Field(default_factory=CardSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    worker_pool: WorkerPoolSettings = Field(default_factory=WorkerPoolSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read from the environment on first use.

    Tests that change environment variables call ``get_settings.cache_clear()``.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()
