"""Configuration system for orca-mcp.

Main exports:
- ServerSettings: Root configuration class
- AllowedRoots: The two sandbox roots derived from settings
- LoggingConfig: Logging configuration
"""

from orca_mcp.config.detection import detect_slicer_path, detect_user_dir
from orca_mcp.config.logging_config import LoggingConfig
from orca_mcp.config.settings import SLICE_TIMEOUT_MS, AllowedRoots, ServerSettings

__all__ = [
    "SLICE_TIMEOUT_MS",
    "AllowedRoots",
    "LoggingConfig",
    "ServerSettings",
    "detect_slicer_path",
    "detect_user_dir",
]
