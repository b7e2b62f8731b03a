"""
Card pipeline configuration settings.

Thresholds and policies for ingestion, deduplication and retrieval.

Dependencies: pydantic, pydantic_settings
System role: Business rule configuration for the card pipelines
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class CardSettings(BaseSettings):
    """Card ingestion, dedup and search configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CARDS_",
        case_sensitive=False,
        extra="ignore",
    )

    min_words: int = Field(
        default=70,
        description="Minimum whitespace-delimited tokens a card must contain",
    )
    lexical_threshold: float = Field(
        default=0.90,
        description="Full-text score at or above which content is a duplicate",
    )
    semantic_threshold: float = Field(
        default=0.95,
        description="Cosine similarity at or above which content is a duplicate",
    )
    short_content_chars: int = Field(
        default=200,
        description="Content shorter than this gets the threshold discount",
    )
    short_content_discount: float = Field(
        default=0.05,
        description="Amount subtracted from both thresholds for short content",
    )
    search_page_size: int = Field(
        default=10,
        ge=1,
        description="Results per search page",
    )
    duplicate_policy: Literal["record", "reject"] = Field(
        default="record",
        description=(
            "'record' persists an audit row for a rejected duplicate, "
            "'reject' refuses it without writing"
        ),
    )
    orphan_policy: Literal["skip", "warn"] = Field(
        default="skip",
        description=(
            "How semantic search treats neighbours with no metadata row: "
            "'skip' drops them, 'warn' drops them and reports their IDs"
        ),
    )
    html_refresh_enabled: bool = Field(
        default=True,
        description="Refresh the existing card's HTML when a duplicate is submitted",
    )
    reconcile_grace_seconds: float = Field(
        default=300.0,
        ge=0,
        description="Vectors younger than this are never treated as orphaned",
    )
