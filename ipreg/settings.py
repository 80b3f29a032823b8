"""
ipreg.settings
==============

Configuration settings for the IP registry.

Values come from ``IPREG_*`` environment variables (or a ``.env`` file)
through a pydantic‑settings model; a few derived constants are exposed at
module level for convenience.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent


# ---------------------------------------------------------------------------
# Pydantic settings model
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IPREG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings
    db_file: Path = Field(default=BASE_DIR / "ipreg.db", description="SQLite database file")
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Registry backend used by the API: persistent SQLite or process memory
    backend: Literal["db", "memory"] = Field(default="db", description="Registry backend")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="Bind address for `ipreg serve`")
    api_port: int = Field(default=8000, description="Port for `ipreg serve`")
    api_debug: bool = Field(default=False, description="Enable uvicorn reload / debug logs")

    # CLI settings
    principal: str = Field(default="", description="Default caller principal for the CLI")

    log_level: str = Field(default="INFO", description="Root logging level")

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.db_file}"


# Initialize settings
settings = Settings()
