"""Filename allowlist applied to caller-supplied leaf names."""

from __future__ import annotations

import re

from orca_mcp.errors import AccessDeniedError

# First character: letter, digit, underscore or hyphen. Then also period and space.
SAFE_FILENAME_PATTERN = re.compile(r"[A-Za-z0-9_\-][A-Za-z0-9_\-. ]*")


def is_safe_filename(name: str) -> bool:
    return SAFE_FILENAME_PATTERN.fullmatch(name) is not None


def validate_filename(name: str) -> str:
    """Reject filenames containing anything but the safe character set.

    Runs before the name is joined into a path, independently of the sandbox,
    so separators, traversal sequences and shell metacharacters never reach a
    path or an argument vector.

    Args:
        name: Leaf filename supplied by the caller.

    Returns:
        The unchanged name.

    Raises:
        AccessDeniedError: If the name is empty or contains a disallowed character.
    """
    if not is_safe_filename(name):
        raise AccessDeniedError(
            f'Invalid filename "{name}": only alphanumerics, underscores, hyphens, '
            "periods, and spaces are allowed.",
            path=name,
        )
    return name
