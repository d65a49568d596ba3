"""Sandboxed whole-file I/O.

Each operation resolves its path argument through the sandbox exactly once and
maps a missing entry to ``NotFoundError``. Other ``OSError``s propagate as-is.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from orca_mcp.errors import CoreError, NotFoundError
from orca_mcp.security.sandbox import PathSandbox

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str]


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


class SafeFileIO:
    """File operations confined to the sandbox roots."""

    def __init__(self, sandbox: PathSandbox) -> None:
        self.sandbox = sandbox

    def read_bytes(self, path: PathArg) -> bytes:
        """Read a whole file.

        Raises:
            AccessDeniedError: If the path is outside the sandbox.
            NotFoundError: If the file does not exist.
        """
        safe = self.sandbox.resolve(path)
        try:
            return safe.path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError.for_path(safe.path) from None

    def read_text(self, path: PathArg) -> str:
        return self.read_bytes(path).decode("utf-8")

    def write_bytes(self, path: PathArg, data: bytes) -> Path:
        """Create or overwrite a file.

        Data goes to a temporary sibling first and is moved into place with
        ``os.replace``, so a failed write leaves any previous content intact.

        Returns:
            The resolved path that was written.
        """
        safe = self.sandbox.resolve(path)
        target = safe.path

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            # mkstemp creates 0600; keep the target's mode or use the umask default.
            try:
                shutil.copymode(target, tmp_name)
            except FileNotFoundError:
                os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("File written", extra={"path": str(target)})
        return target

    def write_text(self, path: PathArg, text: str) -> Path:
        return self.write_bytes(path, text.encode("utf-8"))

    def list_dir(self, path: PathArg) -> list[str]:
        """List the leaf names in a directory.

        Raises:
            NotFoundError: If the directory does not exist.
        """
        safe = self.sandbox.resolve(path)
        try:
            return os.listdir(safe.path)
        except FileNotFoundError:
            raise NotFoundError.for_path(safe.path) from None

    def exists(self, path: PathArg) -> bool:
        """Return True if the entry exists. Never raises."""
        try:
            safe = self.sandbox.resolve(path)
            return safe.path.exists()
        except (CoreError, OSError, ValueError):
            return False

    def stat(self, path: PathArg) -> os.stat_result:
        """Stat an entry.

        Raises:
            NotFoundError: If the entry does not exist.
        """
        safe = self.sandbox.resolve(path)
        try:
            return safe.path.stat()
        except FileNotFoundError:
            raise NotFoundError.for_path(safe.path) from None
