"""
Configuration
Loads environment variables and provides typed settings.

Business logic never reads the process environment directly. The rewrite
adapter and orchestrator receive a Settings instance, which keeps provider
selection explicit and testable.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase (auth, profiles, humanizations, storage)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # Async submit/poll humanization provider (Undetectable.AI)
    # Leave the key blank to skip this strategy entirely.
    undetectable_api_key: str = ""
    undetectable_base_url: str = "https://humanize.undetectable.ai"
    undetectable_model: str = "v11"
    poll_interval_seconds: float = 5.0
    poll_max_attempts: int = 20      # 20 x 5s = ~100s ceiling
    provider_timeout_seconds: float = 30.0

    # Chat-completion provider (OpenAI or any OpenAI-compatible endpoint)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    openai_temperature: float = 0.7

    # Local rule-based fallback
    fallback_randomness: bool = True
    fallback_seed: Optional[int] = None

    # Orchestrator
    # Blank = call the adapter in-process instead of over HTTP
    rewrite_service_url: str = ""
    rewrite_service_timeout_seconds: float = 120.0
    min_text_length: int = 50
    max_text_length: int = 20000

    # Documents
    documents_bucket: str = "documents"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
