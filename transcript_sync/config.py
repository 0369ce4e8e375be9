from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    assemblyai_api_key: str = ""

    # Supabase (only used when storage_backend == "supabase")
    supabase_url: str = ""
    supabase_key: str = ""

    # Storage
    storage_backend: str = "local"
    data_dir: str = "data/transcriptions"
    media_dir: str = "public/media"
    fallback_media_id: str = "test-media"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    llm_model: str = "claude-sonnet-4-20250514"
    max_upload_bytes: int = 100 * 1024 * 1024
    media_chunk_bytes: int = 64 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
