"""Logging utilities."""

from orca_mcp.observability.logging import StructuredFormatter, setup_logging

__all__ = ["StructuredFormatter", "setup_logging"]
