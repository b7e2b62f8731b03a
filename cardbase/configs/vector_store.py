"""
Vector store configuration settings.

Selects the similarity index backend (FAISS for local development, Amazon
S3 Vectors for production) and its location.

Dependencies: pydantic, pydantic_settings
System role: Vector index configuration for dedup and semantic search
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (FAISS for dev, S3 Vectors for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="faiss",
        description="Vector store type: 'faiss' for local dev, 's3' for production",
    )
    aws_region: str = Field(default="us-east-1", description="AWS region for S3 Vectors")
    vectors_bucket: str = Field(
        default="cardbase-vectors",
        description="S3 Vectors bucket name",
    )
    index_name: str = Field(default="debate_cards", description="Vector index name")
    faiss_index_dir: str = Field(
        default="/tmp/.cardbase_faiss",
        description="Directory the local FAISS index is persisted to",
    )
    max_top_k: int = Field(
        default=100,
        description="Largest neighbour count a single backend query may request",
    )
