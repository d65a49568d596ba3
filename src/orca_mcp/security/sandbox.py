"""Allowlist-based path restriction.

Every path the server reads, writes, lists or hands to the slicer goes through
``PathSandbox.resolve``. Resolution is lexical: ``.`` and ``..`` segments are
collapsed without consulting the filesystem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from orca_mcp.config.settings import AllowedRoots
from orca_mcp.errors import AccessDeniedError


@dataclass(frozen=True)
class SandboxedPath:
    """An absolute, normalized path proven to lie inside an allowed root.

    Only ``PathSandbox.resolve`` creates these.

    Attributes:
        path: The normalized absolute path.
        root: The allowed root that contains it.
    """

    path: Path
    root: Path

    def __fspath__(self) -> str:
        return str(self.path)

    def __str__(self) -> str:
        return str(self.path)

    @property
    def name(self) -> str:
        return self.path.name


def _is_inside(candidate: str, root: str) -> bool:
    try:
        rel = os.path.relpath(candidate, root)
    except ValueError:
        # Different drive on Windows.
        return False
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return False
    return not os.path.isabs(rel)


class PathSandbox:
    """Confines paths to the configured work and settings directories.

    Attributes:
        roots: The allowed roots, in order.
    """

    def __init__(self, roots: AllowedRoots) -> None:
        """Initialize the sandbox.

        Args:
            roots: The two allowed root directories. Both must be absolute.
        """
        for root in roots:
            if not root.is_absolute():
                raise ValueError(f"Sandbox root must be absolute: {root}")
        self.roots = roots

    def resolve(self, raw: str | os.PathLike[str]) -> SandboxedPath:
        """Normalize ``raw`` and verify it falls within an allowed root.

        Args:
            raw: Absolute or relative path. Relative paths are taken against
                the process working directory.

        Returns:
            The sandboxed path.

        Raises:
            AccessDeniedError: If the path lies outside every allowed root.
        """
        raw_text = os.fspath(raw)
        normalized = os.path.normpath(os.path.abspath(raw_text))

        for root in self.roots:
            if _is_inside(normalized, str(root)):
                return SandboxedPath(path=Path(normalized), root=root)

        raise AccessDeniedError.outside_roots(raw_text, normalized, self.roots.as_list())

    def contains(self, raw: str | os.PathLike[str]) -> bool:
        """Return True if ``raw`` resolves inside an allowed root."""
        try:
            self.resolve(raw)
        except AccessDeniedError:
            return False
        return True
