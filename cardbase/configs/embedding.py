"""
Embedding configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Embedding model selection for the EmbeddingService
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Google Gemini embedding configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    dimension: int = Field(
        default=1536,
        description="Fixed output dimensionality; must match the vector index",
    )
    max_retries: int = Field(
        default=3,
        description="Attempts per embedding call before raising EmbeddingError",
    )
