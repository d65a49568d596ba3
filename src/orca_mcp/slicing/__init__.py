"""Slicing and G-code analysis."""

from orca_mcp.slicing.service import (
    PROFILE_FLAGS,
    HealthReport,
    SliceRequest,
    SliceResult,
    SliceService,
)

__all__ = ["PROFILE_FLAGS", "HealthReport", "SliceRequest", "SliceResult", "SliceService"]
