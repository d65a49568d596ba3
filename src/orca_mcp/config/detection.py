"""Platform-specific discovery of the OrcaSlicer binary and user directory."""

from __future__ import annotations

import os
import platform
from pathlib import Path


def slicer_candidates(system: str | None = None) -> list[Path]:
    """Return the install locations checked for the OrcaSlicer binary, in order."""
    system = system or platform.system()

    if system == "Windows":
        program_files = Path(os.environ.get("PROGRAMFILES", r"C:\Program Files"))
        return [
            program_files / "OrcaSlicer" / "orca-slicer.exe",
            program_files / "OrcaSlicer" / "orca-slicer-console.exe",
        ]
    if system == "Darwin":
        return [Path("/Applications/OrcaSlicer.app/Contents/MacOS/OrcaSlicer")]
    return [Path("/usr/bin/orca-slicer"), Path("/usr/local/bin/orca-slicer")]


def detect_slicer_path(system: str | None = None) -> Path:
    """Find the OrcaSlicer binary.

    Returns the first candidate that exists, otherwise the first candidate so
    that the health check can report it as missing.
    """
    candidates = slicer_candidates(system)
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def detect_user_dir(system: str | None = None) -> Path:
    """Return the OrcaSlicer user settings directory for this platform."""
    system = system or platform.system()
    home = Path.home()

    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return base / "OrcaSlicer"
    if system == "Darwin":
        return home / "Library" / "Application Support" / "OrcaSlicer"
    return home / ".config" / "OrcaSlicer"
