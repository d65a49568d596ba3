"""Typed failure kinds raised by the sandbox, file I/O, parsers and runner.

The set of kinds is closed: every recoverable failure is one of the four
``ErrorKind`` members. Anything else that escapes the core is an unexpected
failure and must not be dressed up as one of these.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

# Cap applied to captured process output before it is returned or embedded.
OUTPUT_LIMIT = 2000


def truncate_output(text: str | bytes | None, limit: int = OUTPUT_LIMIT) -> str:
    """Decode (if needed) and cut process output to ``limit`` characters."""
    if text is None:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text[:limit]


class ErrorKind(str, Enum):
    """Discriminator for the recoverable failure kinds.

    Attributes:
        ACCESS_DENIED: Path outside the sandbox or unsafe filename.
        NOT_FOUND: File or directory does not exist.
        PARSE_FAILURE: Malformed profile content.
        PROCESS_FAILURE: The external slicer failed, timed out or could not start.
    """

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"
    PROCESS_FAILURE = "process_failure"


class CoreError(Exception):
    """Base exception for all recoverable core failures.

    Attributes:
        message: Human-readable error message.
        details: Additional error context as key-value pairs.

    Details can be accessed as attributes (e.g., error.path).
    """

    kind: ClassVar[ErrorKind]

    # Map attribute names to default values when not in details
    _defaults: ClassVar[dict[str, Any]] = {}

    def __init__(self, message: str, **details: Any) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            **details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __getattr__(self, name: str) -> Any:
        """Access details as attributes."""
        details = self.__dict__.get("details", {})
        if name in details:
            return details[name]
        if name in self._defaults:
            return self._defaults[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}({self.message!r})"

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor state."""
        return (_rebuild_error, (type(self), self.message, dict(self.details)))


class AccessDeniedError(CoreError):
    """Raised when a path escapes the sandbox or a filename is unsafe.

    Attributes from details: path, resolved, allowed_roots (default: ()).
    """

    kind = ErrorKind.ACCESS_DENIED
    _defaults: ClassVar[dict[str, Any]] = {"resolved": None, "allowed_roots": ()}

    @classmethod
    def outside_roots(
        cls,
        raw: str,
        resolved: str,
        roots: Sequence[str | Path],
    ) -> AccessDeniedError:
        """Build the error for a path that resolves outside every root."""
        root_list = ", ".join(str(r) for r in roots)
        return cls(
            f'Access denied: path "{raw}" resolves to "{resolved}" '
            f"which is outside the allowed directories: {root_list}",
            path=raw,
            resolved=resolved,
            allowed_roots=tuple(str(r) for r in roots),
        )


class NotFoundError(CoreError):
    """Raised when a file or directory does not exist.

    Attributes from details: path.
    """

    kind = ErrorKind.NOT_FOUND

    @classmethod
    def for_path(cls, path: str | Path) -> NotFoundError:
        return cls(f"File not found: {path}", path=str(path))


class ParseFailureError(CoreError):
    """Raised when a profile document cannot be parsed.

    Attributes from details: label.
    """

    kind = ErrorKind.PARSE_FAILURE


class ProcessFailureError(CoreError):
    """Raised when the external binary exits non-zero, cannot start or times out.

    Attributes from details: exit_code (default: None), stderr (default: ""),
    timed_out (default: False).
    """

    kind = ErrorKind.PROCESS_FAILURE
    _defaults: ClassVar[dict[str, Any]] = {"exit_code": None, "stderr": "", "timed_out": False}

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str | bytes | None = "",
        **details: Any,
    ) -> None:
        super().__init__(
            message,
            exit_code=exit_code,
            stderr=truncate_output(stderr),
            **details,
        )


def _rebuild_error(
    cls: type[CoreError],
    message: str,
    details: dict[str, Any],
) -> CoreError:
    """Rebuild a CoreError from pickled state."""
    error = cls.__new__(cls)
    Exception.__init__(error, message)
    error.message = message
    error.details = details
    return error
