"""
Application configuration.
All values come from environment variables (or .env).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "traffic_ops"
    password: str = "twelve"
    name: str = "traffic_ops"
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def async_url(self) -> str:
        """URL for the asyncpg driver."""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        )


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    # "json" switches to the structured stdout sink
    format: str = "console"


class AppConfig(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "TrafficOpsAPI"
    version: str = "1.3.0"
    debug: bool = False
    api_prefix: str = "/api/1.3"
    cors_origins: str = "http://localhost:8080"
    error_delimiter: str = ", "

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",")]


class Settings:
    """Aggregates all configuration sections."""

    def __init__(self) -> None:
        self.db = DatabaseConfig()
        self.logging = LoggingConfig()
        self.app = AppConfig()


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings singleton."""
    return Settings()


settings = get_settings()
