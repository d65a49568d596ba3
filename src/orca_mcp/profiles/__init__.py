"""Profile browsing and editing."""

from orca_mcp.profiles.store import (
    ProfileCategory,
    ProfileStore,
    SettingMatch,
    UpdateResult,
    tuned_name,
)

__all__ = ["ProfileCategory", "ProfileStore", "SettingMatch", "UpdateResult", "tuned_name"]
