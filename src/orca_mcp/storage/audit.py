"""Append-only audit trail of mutating operations."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)

AUDIT_LOG_FILENAME = "tuning_history.log"


@dataclass(frozen=True)
class AuditEntry:
    """One audit record.

    Attributes:
        action: Name of the operation (e.g. ``update_profile_setting``).
        details: Operation-specific context.
        timestamp: UTC time the entry was created.
    """

    action: str
    details: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def to_line(self) -> str:
        """Serialize as a single JSON line (without the trailing newline)."""
        return json.dumps({"ts": self.timestamp.isoformat(), "action": self.action, **self.details})


class AuditLog:
    """Best-effort, append-only audit log file.

    Write failures are logged and swallowed so that an audit problem never
    blocks the operation being audited.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def record(self, action: str, details: Mapping[str, Any] | None = None) -> AuditEntry | None:
        """Append an entry.

        Returns:
            The entry written, or None if writing failed.
        """
        entry = AuditEntry(action=action, details=details or {})
        try:
            line = entry.to_line()
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write audit log", extra={"error": str(e), "action": action})
            return None
        return entry
