"""Path sandbox and filename validation."""

from orca_mcp.config.settings import AllowedRoots
from orca_mcp.security.filenames import SAFE_FILENAME_PATTERN, is_safe_filename, validate_filename
from orca_mcp.security.sandbox import PathSandbox, SandboxedPath

__all__ = [
    "SAFE_FILENAME_PATTERN",
    "AllowedRoots",
    "PathSandbox",
    "SandboxedPath",
    "is_safe_filename",
    "validate_filename",
]
