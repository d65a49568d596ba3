"""Strict JSON handling for OrcaSlicer profile documents."""

from __future__ import annotations

import json
from typing import Any

from orca_mcp.errors import ParseFailureError


def parse_profile(raw: str | bytes, label: str) -> dict[str, Any]:
    """Parse a profile document.

    Args:
        raw: File content.
        label: Human label for error messages, usually the resolved path.

    Returns:
        The profile as an ordered mapping.

    Raises:
        ParseFailureError: If the content is not valid JSON or not an object.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseFailureError(f"Failed to parse JSON from {label}: {e}", label=label) from e

    if not isinstance(data, dict):
        raise ParseFailureError(
            f"Failed to parse JSON from {label}: expected an object, got {type(data).__name__}",
            label=label,
        )
    return data


def dump_profile(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
