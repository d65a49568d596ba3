"""Translation of core failures into tool error text."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from mcp.server.fastmcp.exceptions import ToolError

from orca_mcp.errors import CoreError, ErrorKind

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

WIRE_PREFIXES: dict[ErrorKind, str] = {
    ErrorKind.ACCESS_DENIED: "[403 Forbidden]",
    ErrorKind.NOT_FOUND: "[404 Not Found]",
    ErrorKind.PARSE_FAILURE: "[Parse Error]",
    ErrorKind.PROCESS_FAILURE: "[CLI Error]",
}
INTERNAL_PREFIX = "[Internal Error]"

_missing = set(ErrorKind) - set(WIRE_PREFIXES)
if _missing:
    raise RuntimeError(f"No wire prefix for error kinds: {sorted(k.value for k in _missing)}")


def format_error(error: BaseException) -> str:
    """Render an exception as prefixed text for the caller."""
    if isinstance(error, CoreError):
        return f"{WIRE_PREFIXES[error.kind]} {error.message}"
    return f"{INTERNAL_PREFIX} {error}"


def tool_boundary(func: F) -> F:
    """Wrap a tool handler so every failure reaches the caller as a ``ToolError``.

    Core failures are expected and logged at INFO. Anything else is logged
    with its traceback and reported as an internal error.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CoreError as e:
            logger.info("Tool rejected", extra={"tool": func.__name__, "kind": e.kind.value})
            raise ToolError(format_error(e)) from e
        except Exception as e:
            logger.exception("Tool failed unexpectedly", extra={"tool": func.__name__})
            raise ToolError(format_error(e)) from e

    return wrapper  # type: ignore[return-value]
