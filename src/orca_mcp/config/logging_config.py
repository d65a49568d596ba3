"""Logging configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["debug", "info", "error"]


class LoggingConfig(BaseModel):
    """Logging settings for the server process.

    Attributes:
        level: Minimum level emitted (``debug``, ``info`` or ``error``).
        logger_name: Root logger the handler is attached to.
    """

    level: LogLevel = Field(default="info", description="Minimum log level")
    logger_name: str = Field(default="orca_mcp", description="Logger to configure")

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: object) -> str:
        # Unknown levels fall back to info instead of failing startup.
        if isinstance(value, str) and value.lower() in ("debug", "info", "error"):
            return value.lower()
        return "info"
