"""Error taxonomy for the sandboxed core."""

from orca_mcp.errors.exceptions import (
    OUTPUT_LIMIT,
    AccessDeniedError,
    CoreError,
    ErrorKind,
    NotFoundError,
    ParseFailureError,
    ProcessFailureError,
    truncate_output,
)

__all__ = [
    "OUTPUT_LIMIT",
    "AccessDeniedError",
    "CoreError",
    "ErrorKind",
    "NotFoundError",
    "ParseFailureError",
    "ProcessFailureError",
    "truncate_output",
]
