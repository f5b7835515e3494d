"""Settings for the MCP server and request layer.

The expression core never reads configuration; only ``dice.roll_from_text``
and ``server`` do.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator


ENV_PREFIX = "DICE_EXPRESSIONS_"


class Settings(BaseModel):
    server_name: str = Field("mcp-dice-expressions", description="Name advertised by the MCP server")
    log_level: str = Field("WARNING", description="Level for the package logger")
    max_dice: int = Field(1000, ge=1, description="Most dice a single request may roll, across all statements")
    seed: int | None = Field(None, description="Seed for reproducible rolls; unset means system randomness")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v!r}")
        return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``DICE_EXPRESSIONS_*`` variables (e.g. DICE_EXPRESSIONS_MAX_DICE)."""

    env = os.environ if environ is None else environ
    values = {
        name: env[ENV_PREFIX + name.upper()]
        for name in Settings.model_fields
        if ENV_PREFIX + name.upper() in env
    }
    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
