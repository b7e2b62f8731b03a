"""
Metadata store connection settings.

Dependencies: pydantic, pydantic_settings
System role: PostgreSQL connection and pool configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from cardbase.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL (asyncpg) connection and pool configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the individual connection fields",
    )
    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=5432, description="Server port")
    user: str = Field(default="postgres", description="Login role")
    password: str = Field(default="postgres", description="Login password")
    db: str = Field(default="cardbase", description="Database name")
    require_ssl: bool = Field(default=False, description="Require TLS to the server")

    pool_size: int = Field(default=10, ge=1, description="Persistent pooled connections")
    max_overflow: int = Field(default=20, ge=0, description="Extra connections under load")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        if self.url:
            return self.url
        query = "?ssl=require" if self.require_ssl else ""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}{query}"
        )
