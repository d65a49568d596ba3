"""OrcaSlicer profile browsing and editing."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from orca_mcp.errors import CoreError, NotFoundError
from orca_mcp.parsing.profiles import dump_profile, parse_profile
from orca_mcp.security.filenames import validate_filename
from orca_mcp.storage.audit import AuditLog
from orca_mcp.storage.files import SafeFileIO

logger = logging.getLogger(__name__)

TUNED_SUFFIX = "_tuned"


class ProfileCategory(str, Enum):
    """Profile categories, each stored in its own subdirectory of the user dir."""

    MACHINE = "machine"
    FILAMENT = "filament"
    PROCESS = "process"


class SettingMatch(BaseModel):
    """A profile key matching a search query."""

    type: ProfileCategory
    profile: str
    key: str
    value: Any


class UpdateResult(BaseModel):
    """Outcome of a single-key profile update.

    Attributes:
        profile: Filename the document was saved as.
        key: Updated key.
        old_value: Previous value (None if the key was new).
        new_value: Value written.
        dry_run: Whether a ``_tuned`` copy was written instead of the original.
    """

    profile: str
    key: str
    old_value: Any = None
    new_value: Any = None
    dry_run: bool = True


def tuned_name(name: str) -> str:
    """Return the copy-on-write filename for ``name`` (``a.json`` -> ``a_tuned.json``)."""
    path = Path(name)
    return f"{path.stem}{TUNED_SUFFIX}{path.suffix}"


class ProfileStore:
    """Reads and writes profile JSON files under ``<settings_dir>/<category>/``."""

    def __init__(self, settings_dir: Path, files: SafeFileIO, audit: AuditLog) -> None:
        self.settings_dir = settings_dir
        self.files = files
        self.audit = audit

    def directory(self, category: ProfileCategory | str) -> Path:
        return self.settings_dir / ProfileCategory(category).value

    def path_for(self, category: ProfileCategory | str, name: str) -> Path:
        """Validate ``name`` and join it onto the category directory."""
        return self.directory(category) / validate_filename(name)

    def list_profiles(self, category: ProfileCategory | str) -> list[str]:
        """Return the sorted ``.json`` filenames in a category.

        A category directory that does not exist yet has no profiles.
        """
        try:
            entries = self.files.list_dir(self.directory(category))
        except NotFoundError:
            return []
        return sorted(entry for entry in entries if entry.endswith(".json"))

    def read_profile(self, category: ProfileCategory | str, name: str) -> dict[str, Any]:
        """Read and parse one profile.

        Raises:
            AccessDeniedError: If the name is unsafe.
            NotFoundError: If the profile does not exist.
            ParseFailureError: If the file is not a JSON object.
        """
        path = self.path_for(category, name)
        raw = self.files.read_bytes(path)
        return parse_profile(raw, str(path))

    def search_settings(
        self,
        query: str,
        category: ProfileCategory | str | None = None,
    ) -> list[SettingMatch]:
        """Find keys containing ``query`` (case-insensitive) across profiles.

        Profiles that cannot be read or parsed are skipped.
        """
        categories = [ProfileCategory(category)] if category else list(ProfileCategory)
        needle = query.lower()
        matches: list[SettingMatch] = []

        for cat in categories:
            for name in self.list_profiles(cat):
                try:
                    data = self.read_profile(cat, name)
                except (CoreError, OSError) as e:
                    logger.debug("Skipping unreadable profile", extra={"profile": name, "error": str(e)})
                    continue
                for key, value in data.items():
                    if needle in key.lower():
                        matches.append(SettingMatch(type=cat, profile=name, key=key, value=value))

        return matches

    def update_setting(
        self,
        category: ProfileCategory | str,
        name: str,
        key: str,
        value: Any,
        *,
        dry_run: bool = True,
    ) -> UpdateResult:
        """Overwrite one key in a profile.

        Args:
            category: Profile category.
            name: Profile filename.
            key: Key to set.
            value: New JSON-compatible value.
            dry_run: If True, save to ``<stem>_tuned<ext>`` and leave the
                original untouched. Otherwise overwrite the original.

        Returns:
            UpdateResult describing the change.
        """
        category = ProfileCategory(category)
        data = self.read_profile(category, name)
        old_value = data.get(key)
        data[key] = value

        target_name = tuned_name(name) if dry_run else name
        self.files.write_text(self.path_for(category, target_name), dump_profile(data))

        self.audit.record(
            "update_profile_setting",
            {
                "type": category.value,
                "profile": name,
                "savedAs": target_name,
                "key": key,
                "oldValue": old_value,
                "newValue": value,
                "dryRun": dry_run,
            },
        )

        return UpdateResult(
            profile=target_name,
            key=key,
            old_value=old_value,
            new_value=value,
            dry_run=dry_run,
        )
