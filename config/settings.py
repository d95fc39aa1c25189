"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Cache limits
    cache_max_size: int = 50 * 1024 * 1024          # 50 MiB
    cache_max_entries: int = 1000

    # Cache timing (seconds)
    cache_default_ttl_seconds: float = 300          # 5 minutes
    cache_cleanup_interval_seconds: float = 60      # 1 minute

    # Values serializing above this many bytes are compressed before storage
    cache_compression_threshold: int = 100 * 1024   # 100 KiB

    # Background expiry sweep; disable for one-shot scripts
    cache_cleanup_enabled: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
