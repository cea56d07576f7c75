"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:4000",
    ]

    # Content
    content_dir: str = "_posts"
    post_glob: str = "*.md"

    # Parsed-index cache; edits to files invalidate it regardless of TTL
    cache_ttl_seconds: float = 60.0

    # Upper bound on documents parsed concurrently in a batch
    max_parallel_parses: int = 8

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
