"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Document store
    mongo_url: str = "mongodb://localhost:27017/social"
    mongo_database: str = "social"  # Used when the URL names no database
    mongo_timeout_ms: int = 5000

    # Authentication
    jwt_secret: str = ""  # Required; the token issuer refuses to start without it

    # Server
    host: str = "0.0.0.0"
    port: int = 6001
    cors_origins: str = "*"

    # Request handling
    max_body_bytes: int = 30 * 1024 * 1024  # 30 MB
    assets_dir: str = "public/assets"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
