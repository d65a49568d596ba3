"""Tool handlers, independent of the MCP transport."""

from __future__ import annotations

import json
import math
from typing import Any

from orca_mcp.config.settings import ServerSettings
from orca_mcp.profiles.store import ProfileCategory, ProfileStore
from orca_mcp.runner.process import SubprocessRunner
from orca_mcp.security.sandbox import PathSandbox
from orca_mcp.slicing.service import SliceRequest, SliceService
from orca_mcp.storage.audit import AuditLog
from orca_mcp.storage.files import SafeFileIO


def to_text(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class OrcaTools:
    """The server's operations, returning JSON-compatible payloads.

    Failures surface as ``CoreError`` subclasses; rendering them is left to
    the protocol layer.
    """

    def __init__(self, settings: ServerSettings) -> None:
        self.settings = settings
        self.sandbox = PathSandbox(settings.allowed_roots())
        self.files = SafeFileIO(self.sandbox)
        self.audit = AuditLog(settings.audit_log_path)
        self.runner = SubprocessRunner(
            settings.slicer_path,
            default_timeout_ms=settings.slice_timeout_ms,
        )
        self.profiles = ProfileStore(settings.user_dir, self.files, self.audit)
        self.slicer = SliceService(
            settings,
            self.sandbox,
            self.files,
            self.runner,
            self.profiles,
            self.audit,
        )

    def list_profiles(self, type: str) -> dict[str, Any]:
        category = ProfileCategory(type)
        return {"type": category.value, "profiles": self.profiles.list_profiles(category)}

    def search_settings(self, query: str, type: str | None = None) -> dict[str, Any]:
        matches = self.profiles.search_settings(query, type)
        return {"query": query, "matches": [m.model_dump(mode="json") for m in matches]}

    def get_profile_content(self, type: str, name: str) -> dict[str, Any]:
        return self.profiles.read_profile(type, name)

    def update_profile_setting(
        self,
        type: str,
        name: str,
        key: str,
        value: Any,
        dry_run: bool = True,
    ) -> dict[str, Any]:
        result = self.profiles.update_setting(type, name, key, value, dry_run=dry_run)
        return {
            "success": True,
            "profile": result.profile,
            "key": result.key,
            "oldValue": result.old_value,
            "newValue": result.new_value,
            "dry_run": result.dry_run,
        }

    def slice_model(self, **arguments: Any) -> dict[str, Any]:
        request = SliceRequest(**arguments)
        return self.slicer.slice_model(request).model_dump()

    def analyze_gcode(self, file: str) -> dict[str, Any]:
        metadata = self.slicer.analyze_gcode(file).to_dict()
        # Malformed numbers parse as nan, which JSON cannot carry.
        return {
            key: None if isinstance(value, float) and not math.isfinite(value) else value
            for key, value in metadata.items()
        }

    def health_check(self) -> dict[str, Any]:
        return self.slicer.health().model_dump(by_alias=True)
