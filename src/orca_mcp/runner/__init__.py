"""External process execution."""

from orca_mcp.runner.process import ProcessResult, SubprocessRunner

__all__ = ["ProcessResult", "SubprocessRunner"]
