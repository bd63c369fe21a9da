"""
refurb.settings
===============

Configuration settings for the Refurb tracker.

This module provides centralized configuration options that can be used
across the package.  Every value has a sensible default and can be
overridden via ``REFURB_*`` environment variables or a local ``.env`` file.
"""

from __future__ import annotations

from pathlib import Path

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
    """Pydantic model for application settings, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REFURB_",
        env_file=".env",         # load from .env file if present
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    db_file: Path = Field(default=BASE_DIR / "refurb.db", description="SQLite file holding the blob store")
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Identifier allocation
    unit_prefix: str = Field(default="XBX", description="Id prefix for console units")
    controller_prefix: str = Field(default="CTL", description="Id prefix for controllers")
    unit_id_floor: int = Field(default=101, ge=1, description="Lowest numeric suffix ever handed out for units")
    controller_id_floor: int = Field(default=101, ge=1, description="Lowest numeric suffix ever handed out for controllers")

    # Output
    export_dir: Path = Field(default=Path("."), description="Default directory for JSON/CSV exports")
    image_dir: Path = Field(default=Path("images"), description="Default directory for charts")

    log_level: str = Field(default="WARNING", description="Root log level used by the CLI")

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.db_file}"


# Initialize settings
settings = Settings()

DB_URL = settings.db_url
DB_ECHO = settings.db_echo
