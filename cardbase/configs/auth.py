"""
Identity configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Configuration for the authenticated-session header
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """Authenticated-session header configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    user_header: str = Field(
        default="X-User-Id",
        description="Header carrying the user ID set by the session gateway",
    )
