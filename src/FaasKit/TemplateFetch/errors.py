"""Exception hierarchy shared across template acquisition, expansion, and cleanup.

Fetching templates spans an HTTP download, archive parsing, and filesystem
mutation. This module groups the package-defined failure modes so callers can
react to high-level categories while still reaching the specialised subclass
when finer-grained handling is required. Transport errors from HTTPX and
filesystem errors from the operating system are deliberately not wrapped; they
reach the caller as raised.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "TemplateFetchError",
    "DownloadFailure",
    "ArchiveOpenError",
    "UnsafeArchiveEntryError",
    "TruncatedEntryError",
    "CorruptArchiveEntryError",
    "UserConfigError",
]


class TemplateFetchError(RuntimeError):
    """Base exception for template acquisition, expansion, or cleanup failures."""


class DownloadFailure(TemplateFetchError):
    """Raised when the archive endpoint answers with a non-200 status."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ArchiveOpenError(TemplateFetchError):
    """Raised when the local archive cannot be parsed as a zip container."""


class UnsafeArchiveEntryError(TemplateFetchError):
    """Raised when a template entry would resolve outside the template tree."""

    def __init__(self, message: str, *, entry_name: str) -> None:
        super().__init__(message)
        self.entry_name = entry_name


class TruncatedEntryError(TemplateFetchError):
    """Raised when an archive entry yields fewer bytes than its declared size."""

    def __init__(self, message: str, *, expected: int, received: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received


class CorruptArchiveEntryError(TemplateFetchError):
    """Raised when an entry fails its CRC check or its data cannot be decompressed."""

    def __init__(self, message: str, *, entry_name: str) -> None:
        super().__init__(message)
        self.entry_name = entry_name


class UserConfigError(TemplateFetchError):
    """Raised when CLI arguments or YAML configuration inputs are invalid."""
# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.errors",
#   "purpose": "Define the exception hierarchy used across template acquisition, expansion, and cleanup",
#   "sections": [
#     {"id": "base", "name": "Base Exceptions", "anchor": "BAS", "kind": "api"},
#     {"id": "download", "name": "Download Errors", "anchor": "DWN", "kind": "api"},
#     {"id": "archive", "name": "Archive Errors", "anchor": "ARC", "kind": "api"},
#     {"id": "configuration", "name": "Configuration Errors", "anchor": "CFG", "kind": "api"}
#   ]
# }
# === /NAVMAP ===
