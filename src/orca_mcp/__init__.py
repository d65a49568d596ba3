"""
orca-mcp - An MCP server for OrcaSlicer with a sandboxed file and process core.

Quick Start:
    >>> from orca_mcp import ServerSettings, OrcaTools
    >>> settings = ServerSettings(workdir="./work", user_dir="~/.config/OrcaSlicer")
    >>> tools = OrcaTools(settings)
    >>> tools.list_profiles("process")
    {'type': 'process', 'profiles': ['standard_quality.json']}

Security Core:
    - PathSandbox: confines every path to the work and user directories
    - validate_filename: allowlist for caller-supplied leaf names
    - SafeFileIO: whole-file I/O through the sandbox
    - SubprocessRunner: argument-vector execution with a timeout
    - AuditLog: best-effort append-only record of mutations

Running the server:
    $ orca-mcp --workdir=/path/to/models
"""

__version__ = "2.0.0"

from orca_mcp.config import AllowedRoots, LoggingConfig, ServerSettings
from orca_mcp.errors import (
    AccessDeniedError,
    CoreError,
    ErrorKind,
    NotFoundError,
    ParseFailureError,
    ProcessFailureError,
)
from orca_mcp.parsing import GcodeMetadata, parse_gcode_metadata, parse_profile
from orca_mcp.profiles import ProfileCategory, ProfileStore
from orca_mcp.runner import ProcessResult, SubprocessRunner
from orca_mcp.security import PathSandbox, SandboxedPath, validate_filename
from orca_mcp.server.tools import OrcaTools
from orca_mcp.slicing import SliceRequest, SliceService
from orca_mcp.storage import AuditEntry, AuditLog, SafeFileIO

__all__ = [
    "AccessDeniedError",
    "AllowedRoots",
    "AuditEntry",
    "AuditLog",
    "CoreError",
    "ErrorKind",
    "GcodeMetadata",
    "LoggingConfig",
    "NotFoundError",
    "OrcaTools",
    "ParseFailureError",
    "PathSandbox",
    "ProcessFailureError",
    "ProcessResult",
    "ProfileCategory",
    "ProfileStore",
    "SafeFileIO",
    "SandboxedPath",
    "ServerSettings",
    "SliceRequest",
    "SliceService",
    "SubprocessRunner",
    "__version__",
    "parse_gcode_metadata",
    "parse_profile",
    "validate_filename",
]
