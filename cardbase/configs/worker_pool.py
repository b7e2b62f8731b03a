"""
Worker pool configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Sizing of the bounded pool for blocking backend calls
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class WorkerPoolSettings(BaseSettings):
    """Bounded thread pool configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WORKER_POOL_",
        case_sensitive=False,
        extra="ignore",
    )

    max_workers: int = Field(
        default=8,
        ge=1,
        description="Threads available for blocking vector backend calls",
    )
