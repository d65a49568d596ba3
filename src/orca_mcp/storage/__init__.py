"""Sandboxed file I/O and the audit log."""

from orca_mcp.storage.audit import AUDIT_LOG_FILENAME, AuditEntry, AuditLog
from orca_mcp.storage.files import SafeFileIO

__all__ = ["AUDIT_LOG_FILENAME", "AuditEntry", "AuditLog", "SafeFileIO"]
