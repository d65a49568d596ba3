"""Profile JSON and G-code metadata parsers."""

from orca_mcp.parsing.gcode import TAIL_SIZE, GcodeMetadata, parse_gcode_metadata
from orca_mcp.parsing.profiles import dump_profile, parse_profile

__all__ = [
    "TAIL_SIZE",
    "GcodeMetadata",
    "dump_profile",
    "parse_gcode_metadata",
    "parse_profile",
]
