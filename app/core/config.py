from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Vigenère Cryptanalysis Service"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Lexicon files
    dictionary_path: Path = DATA_DIR / "words.json"
    known_keys_path: Path = DATA_DIR / "known_keys.json"

    # Rate limiting (per client address)
    rate_limit_enabled: bool = True
    rate_limit: str = "30 per 15 minutes"

    # Dispatcher
    worker_count: int | None = None
    dispatcher_backend: Literal["process", "thread"] = "process"

    # Crack defaults and limits
    max_ciphertext_length: int = 100_000
    default_max_key_length: int = 10
    default_target_recognition: float = 90.0
    default_max_iterations: int = 35
    max_key_length_limit: int = 20
    max_iterations_limit: int = 500

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
