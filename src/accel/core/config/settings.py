from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Process-level configuration.

    Single source of truth for:
    - environment selection
    - logging behavior
    - where motions live and which backend they target
    - engine concurrency policy
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCEL_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Target ------------------------------------------------------

    database_url: str = Field(
        default="memory://",
        description="Target url handed to the driver",
    )

    # Inferred from database_url when unset
    driver: Optional[str] = Field(
        default=None,
        description="Explicit driver name (e.g. 'postgres', 'memory')",
    )

    # ---- Catalog -----------------------------------------------------

    motions_dir: Path = Field(
        default=Path("motions"),
        description="Directory holding the motion template and motion files",
    )

    # ---- Engine ------------------------------------------------------

    single_flight: bool = Field(
        default=False,
        description="Serialize overlapping calls on one engine instance",
    )

    journal_path: Optional[Path] = Field(
        default=None,
        description="Append step notifications to this JSONL file",
    )


# Singleton settings object
settings = AppSettings()
