"""Library configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from SHAPEGUARD_* environment variables."""

    # Longest chain of lazy references a descriptor may resolve through
    MAX_DEPTH: int = 128

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    model_config = {"env_prefix": "SHAPEGUARD_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
