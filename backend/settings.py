"""Application settings and their JSON loader."""

from __future__ import annotations

import json
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when the settings file cannot be loaded or parsed."""


class AppSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        description="Frontend origins allowed to call /api/*.",
    )
    log_level: str = Field("INFO", description="Minimum level for the log sinks.")
    log_file: Optional[str] = Field(None, description="Rotating log file; stderr only when unset.")

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(file_path: str) -> AppSettings:
    if not os.path.exists(file_path):
        raise ConfigurationError(f"Settings file not found at: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error decoding JSON from settings file {file_path}: {e}") from e

    try:
        return AppSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {file_path}: {e}") from e
