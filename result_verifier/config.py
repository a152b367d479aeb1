"""
Runtime configuration, read from the environment (and a local .env file).

Every setting has a default so the service starts with nothing configured;
only the AI extraction needs OPENAI_API_KEY.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEED_PATH = Path(__file__).parent.parent / "registry_seed.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # AI extraction
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    extraction_timeout: float = 60.0  # seconds

    # Registry
    seed_path: str = str(DEFAULT_SEED_PATH)  # empty string disables seeding
    exclude_revoked: bool = False

    # Admin login
    admin_username: str = "shreesha"
    admin_password: str = "password"

    # Uploads
    max_upload_bytes: int = 10 * 1_048_576


@lru_cache
def get_settings() -> Settings:
    return Settings()
