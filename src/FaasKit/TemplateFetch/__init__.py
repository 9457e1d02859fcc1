# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch",
#   "purpose": "Package initialization for FaasKit.TemplateFetch",
#   "sections": []
# }
# === /NAVMAP ===

"""Public API for fetching function templates from a repository archive.

The facade exposes the acquire, expand, and clean up building blocks plus the
:func:`fetch_templates` orchestration that chains them for one run.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .acquire import archive_url, fetch_master_zip
from .classify import ClassifiedEntry, EntryKind, classify_entry, strip_archive_root
from .cleanup import remove_archive
from .errors import (
    ArchiveOpenError,
    CorruptArchiveEntryError,
    DownloadFailure,
    TemplateFetchError,
    TruncatedEntryError,
    UnsafeArchiveEntryError,
    UserConfigError,
)
from .expand import ExpansionResult, expand_templates_from_zip
from .fetch import fetch_templates
from .net import make_http_client
from .policy import LanguagePolicyCache
from .settings import TemplateFetchSettings, load_settings

__all__ = [
    "__version__",
    "archive_url",
    "fetch_master_zip",
    "ClassifiedEntry",
    "EntryKind",
    "classify_entry",
    "strip_archive_root",
    "remove_archive",
    "ArchiveOpenError",
    "DownloadFailure",
    "TemplateFetchError",
    "TruncatedEntryError",
    "CorruptArchiveEntryError",
    "UnsafeArchiveEntryError",
    "UserConfigError",
    "ExpansionResult",
    "expand_templates_from_zip",
    "fetch_templates",
    "make_http_client",
    "LanguagePolicyCache",
    "TemplateFetchSettings",
    "load_settings",
]
