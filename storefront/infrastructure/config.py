"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Content store
    content_backend: str = "sanity"  # "sanity" or "memory"
    content_fixture_path: str | None = None  # NDJSON export for the memory backend

    sanity_project_id: str = "your-project-id"
    sanity_dataset: str = "production"
    sanity_api_version: str = "2024-01-01"
    sanity_use_cdn: bool = True
    sanity_token: str | None = None
    sanity_timeout: float = 10.0

    # Inventory
    low_stock_threshold: int = 5

    # Authentication for inventory and customer endpoints
    admin_api_key: str = "dev-admin-key-change-in-production"

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
