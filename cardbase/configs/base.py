"""
Shared settings base.

Every settings group reads the same ``.env`` file and ignores keys that
belong to other groups.

Dependencies: pydantic, pydantic_settings
System role: Foundation for the configuration groups
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Process-level options shared by all settings groups."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Return FastAPI debug tracebacks (never in production)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )
