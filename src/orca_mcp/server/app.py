"""MCP server exposing the OrcaSlicer tools over stdio."""

import logging
from typing import Annotated, Any, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from orca_mcp.config.settings import SLICE_TIMEOUT_MS, ServerSettings
from orca_mcp.server.boundary import tool_boundary
from orca_mcp.server.tools import OrcaTools, to_text

logger = logging.getLogger(__name__)

SERVER_NAME = "orcaslicer-mcp-server"

Category = Annotated[
    Literal["machine", "filament", "process"],
    Field(description="Profile category."),
]


def create_server(settings: ServerSettings, tools: Optional[OrcaTools] = None) -> FastMCP:
    """Build the FastMCP server and register every tool.

    Args:
        settings: Server configuration.
        tools: Pre-built handlers. Built from ``settings`` when omitted.

    Returns:
        A FastMCP instance ready for ``run()``.
    """
    tools = tools or OrcaTools(settings)
    server = FastMCP(SERVER_NAME)

    @server.tool(
        name="list_profiles",
        description="List available profile files for a given category (machine, filament, or process).",
    )
    @tool_boundary
    def list_profiles(type: Category) -> str:
        return to_text(tools.list_profiles(type))

    @server.tool(
        name="search_settings",
        description=(
            "Search for setting keys containing a keyword across all (or a specific type of) "
            'profiles. For example, query "infill" returns all infill-related settings and '
            "their current values."
        ),
    )
    @tool_boundary
    def search_settings(
        query: Annotated[str, Field(min_length=1, description='Keyword to search (e.g. "infill", "speed").')],
        type: Optional[Category] = None,
    ) -> str:
        return to_text(tools.search_settings(query, type))

    @server.tool(
        name="get_profile_content",
        description="Read and return the full JSON content of a profile file.",
    )
    @tool_boundary
    def get_profile_content(
        type: Category,
        name: Annotated[str, Field(min_length=1, description="Profile filename (with .json extension).")],
    ) -> str:
        return to_text(tools.get_profile_content(type, name))

    @server.tool(
        name="update_profile_setting",
        description=(
            "Update a single setting key in a profile. By default (dry_run=true), the change is "
            "saved to a _tuned copy rather than overwriting the original."
        ),
    )
    @tool_boundary
    def update_profile_setting(
        type: Category,
        name: Annotated[str, Field(min_length=1, description="Profile filename.")],
        key: Annotated[str, Field(min_length=1, description="Setting key to update.")],
        value: Annotated[Any, Field(description="New value for the setting.")],
        dry_run: Annotated[
            bool,
            Field(description="If true, save as a _tuned copy instead of overwriting the original."),
        ] = True,
    ) -> str:
        return to_text(tools.update_profile_setting(type, name, key, value, dry_run=dry_run))

    @server.tool(
        name="slice_model",
        description=(
            "Slice an STL/3MF model into G-code using the OrcaSlicer CLI. Input and output "
            "files live in the work directory; profiles are optional filenames."
        ),
    )
    @tool_boundary
    def slice_model(
        input_file: Annotated[str, Field(min_length=1, description="STL / 3MF input file name.")],
        output_file: Annotated[str, Field(min_length=1, description="Desired G-code output file name.")],
        profile_machine: Annotated[Optional[str], Field(description="Machine profile filename.")] = None,
        profile_filament: Annotated[Optional[str], Field(description="Filament profile filename.")] = None,
        profile_process: Annotated[Optional[str], Field(description="Process profile filename.")] = None,
        timeout_ms: Annotated[int, Field(gt=0, description="Timeout in milliseconds.")] = SLICE_TIMEOUT_MS,
    ) -> str:
        return to_text(
            tools.slice_model(
                input_file=input_file,
                output_file=output_file,
                profile_machine=profile_machine,
                profile_filament=profile_filament,
                profile_process=profile_process,
                timeout_ms=timeout_ms,
            )
        )

    @server.tool(
        name="analyze_gcode",
        description="Extract metadata (print time, filament usage, layer count) from a G-code file.",
    )
    @tool_boundary
    def analyze_gcode(
        file: Annotated[str, Field(min_length=1, description="G-code file name (inside the work directory).")],
    ) -> str:
        return to_text(tools.analyze_gcode(file))

    @server.tool(
        name="health_check",
        description="Report whether the OrcaSlicer binary, user directory and work directory are available.",
    )
    @tool_boundary
    def health_check() -> str:
        return to_text(tools.health_check())

    return server
