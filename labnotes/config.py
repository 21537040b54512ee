"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Custom patterns must define a `number` group; `kind` is optional.
DEFAULT_SESSION_PATTERN = r"(?i)(?<![a-z])(?P<kind>day|session|lab|week)[\s_\-]*(?P<number>\d+)"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Notes location
    notes_root: Path = Path(".")
    note_glob: str = "*.md"
    recursive: bool = True

    # Directory names never scanned (hidden directories are always skipped)
    exclude: list[str] = ["node_modules", ".git", "venv"]

    # Index
    index_exclude: list[str] = ["README.md", "INDEX.md"]
    index_file: str = "INDEX.md"
    index_title: str = "Workshop Notes"

    # Session numbering
    session_pattern: str = DEFAULT_SESSION_PATTERN

    # Search
    search_limit: int = 5


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
