"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - All paths derive from diagrams_path (env DIAGRAMS_PATH), the mounted data volume

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for every setting: works out-of-the-box with a /data volume mount
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    diagrams_path: Path = Path("/data")
    diagrams_subdir: str = "diagrams"
    filters_subdir: str = "diagram_filters"
    config_filename: str = "config.json"
    verify_writes: bool = True

    @field_validator("diagrams_subdir", "filters_subdir", "config_filename")
    @classmethod
    def reject_nested_paths(cls, v: str) -> str:
        """Layout names are single path segments inside diagrams_path."""
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"'{v}' must be a single path segment")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    max_body_bytes: int = 10 * 1024 * 1024

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
