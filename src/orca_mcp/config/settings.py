"""Server settings loaded from the environment and ``.env``."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orca_mcp.config.detection import detect_slicer_path, detect_user_dir
from orca_mcp.config.logging_config import LoggingConfig

# Default timeout for slicing operations (5 minutes).
SLICE_TIMEOUT_MS = 300_000


def _normalize(path: str | Path) -> Path:
    # Lexical only: symlinks are not followed so roots and candidates compare alike.
    return Path(os.path.abspath(os.path.expanduser(str(path))))


@dataclass(frozen=True)
class AllowedRoots:
    """The two directories every file operation is confined to.

    Attributes:
        workdir: Directory holding models, G-code and the audit log.
        settings_dir: OrcaSlicer user directory holding the profiles.
    """

    workdir: Path
    settings_dir: Path

    @classmethod
    def from_paths(cls, workdir: str | Path, settings_dir: str | Path) -> AllowedRoots:
        """Build roots from arbitrary paths, making both absolute and normalized."""
        return cls(workdir=_normalize(workdir), settings_dir=_normalize(settings_dir))

    def __iter__(self) -> Iterator[Path]:
        yield self.workdir
        yield self.settings_dir

    def as_list(self) -> list[Path]:
        return [self.workdir, self.settings_dir]


class ServerSettings(BaseSettings):
    """Root configuration for the OrcaSlicer MCP server.

    Values are read from (highest precedence first) constructor arguments,
    environment variables and a ``.env`` file in the current directory.

    Attributes:
        slicer_path: OrcaSlicer executable (``ORCA_SLICER_PATH``).
        user_dir: OrcaSlicer user directory (``ORCA_USER_DIR``).
        workdir: Work directory for models and G-code (``ORCA_WORKDIR``).
        log_level: ``debug``, ``info`` or ``error`` (``MCP_LOG_LEVEL``).
        slice_timeout_ms: Default slicing timeout (``SLICE_TIMEOUT_MS``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    slicer_path: Path = Field(
        default_factory=detect_slicer_path,
        validation_alias=AliasChoices("ORCA_SLICER_PATH", "slicer_path"),
    )
    user_dir: Path = Field(
        default_factory=detect_user_dir,
        validation_alias=AliasChoices("ORCA_USER_DIR", "user_dir"),
    )
    workdir: Path = Field(
        default_factory=Path.cwd,
        validation_alias=AliasChoices("ORCA_WORKDIR", "workdir"),
    )
    log_level: str = Field(
        default="info",
        validation_alias=AliasChoices("MCP_LOG_LEVEL", "log_level"),
    )
    slice_timeout_ms: int = Field(
        default=SLICE_TIMEOUT_MS,
        gt=0,
        validation_alias=AliasChoices("SLICE_TIMEOUT_MS", "slice_timeout_ms"),
    )

    @field_validator("user_dir", "workdir", mode="after")
    @classmethod
    def _absolute(cls, value: Path) -> Path:
        return _normalize(value)

    @property
    def logging(self) -> LoggingConfig:
        return LoggingConfig(level=self.log_level)

    def allowed_roots(self) -> AllowedRoots:
        """Return the sandbox roots (work directory first, then user directory)."""
        return AllowedRoots(workdir=self.workdir, settings_dir=self.user_dir)

    @property
    def audit_log_path(self) -> Path:
        return self.workdir / "tuning_history.log"
