# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.expand",
#   "purpose": "Selectively expand language template trees from a branch archive",
#   "sections": [
#     {"id": "expansionresult", "name": "ExpansionResult", "anchor": "class-expansionresult", "kind": "class"},
#     {"id": "expand-templates-from-zip", "name": "expand_templates_from_zip", "anchor": "function-expand-templates-from-zip", "kind": "function"},
#     {"id": "admit-entry", "name": "_admit_entry", "anchor": "function-admit-entry", "kind": "function"},
#     {"id": "materialize-entry", "name": "_materialize_entry", "anchor": "function-materialize-entry", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Selectively expand language template trees from a branch archive.

Entries are processed one at a time in the order the zip central directory
lists them. Each entry is classified, checked against the per-run
:class:`~FaasKit.TemplateFetch.policy.LanguagePolicyCache`, and then either
skipped or fully written. The first failure aborts the run; entries written
before it stay on disk.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from .classify import ClassifiedEntry, EntryKind, classify_entry
from .constants import TEMPLATE_DIRECTORY
from .errors import ArchiveOpenError, CorruptArchiveEntryError, UnsafeArchiveEntryError
from .policy import LanguagePolicyCache
from .writer import create_path, directory_mode, entry_mode, write_file

LOGGER = logging.getLogger("FaasKit.TemplateFetch.expand")

__all__ = ["ExpansionResult", "expand_templates_from_zip"]


@dataclass
class ExpansionResult:
    """Languages skipped because they exist locally, and languages written.

    Attributes:
        existing_languages: Languages whose local tree blocked writing.
        fetched_languages: Languages whose root directory entry was written.
    """

    existing_languages: List[str] = field(default_factory=list)
    fetched_languages: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[List[str]]:
        yield self.existing_languages
        yield self.fetched_languages


def expand_templates_from_zip(
    archive: Path,
    overwrite: bool,
    *,
    destination: Optional[Path] = None,
    template_dir: str = TEMPLATE_DIRECTORY,
    policy: Optional[LanguagePolicyCache] = None,
    logger: Optional[logging.Logger] = None,
) -> ExpansionResult:
    """Expand the language trees of ``archive`` that may be written.

    Args:
        archive: Local zip archive with a single synthetic top-level directory.
        overwrite: Whether existing local language directories may be replaced.
        destination: Directory receiving ``template/...``; the working
            directory by default.
        template_dir: Name of the template directory inside the archive.
        policy: Decision cache for this run; a fresh one is built when omitted.
        logger: Logger receiving progress messages.

    Returns:
        :class:`ExpansionResult` listing skipped and fetched languages.

    Raises:
        ArchiveOpenError: If ``archive`` is not a zip container.
        UnsafeArchiveEntryError: If a template entry path contains ``.``/``..``
            or empty segments.
        TruncatedEntryError: If an entry yields fewer bytes than declared.
        CorruptArchiveEntryError: If an entry fails its CRC check or cannot be
            decompressed.
        OSError: If an entry cannot be read or a directory or file cannot be
            written.
    """

    log = logger or LOGGER
    root = Path(destination) if destination is not None else Path(".")
    cache = policy if policy is not None else LanguagePolicyCache(root / template_dir)
    result = ExpansionResult()

    try:
        zip_file = zipfile.ZipFile(archive)
    except zipfile.BadZipFile as exc:
        raise ArchiveOpenError(f"Failed to open template archive {archive}: {exc}") from exc

    written = 0
    with zip_file:
        for info in zip_file.infolist():
            entry = classify_entry(info.filename, template_dir=template_dir)
            if not _admit_entry(entry, cache, overwrite, result):
                continue
            _materialize_entry(zip_file, info, entry, root)
            written += 1

    log.debug(
        "expanded template archive",
        extra={
            "stage": "expand",
            "archive": str(archive),
            "entries_written": written,
            "fetched": list(result.fetched_languages),
            "existing": list(result.existing_languages),
        },
    )
    return result


def _admit_entry(
    entry: ClassifiedEntry,
    cache: LanguagePolicyCache,
    overwrite: bool,
    result: ExpansionResult,
) -> bool:
    """Return whether ``entry`` should be written, recording root decisions."""

    if entry.kind in (EntryKind.NOT_TEMPLATE, EntryKind.ROOT_MARKER) or not entry.language:
        return False

    writable = cache.decide(entry.language, overwrite)
    if entry.kind is EntryKind.LANGUAGE_ROOT:
        if not writable:
            if entry.language not in result.existing_languages:
                result.existing_languages.append(entry.language)
            return False
        if entry.language not in result.fetched_languages:
            result.fetched_languages.append(entry.language)
    return writable


def _materialize_entry(
    zip_file: zipfile.ZipFile,
    info: zipfile.ZipInfo,
    entry: ClassifiedEntry,
    root: Path,
) -> None:
    """Create directories for ``entry`` and write its content when it is a file."""

    segments = entry.relative_path.rstrip("/").split("/")
    if any(segment in {"", ".", ".."} for segment in segments):
        raise UnsafeArchiveEntryError(
            f"Unsafe path detected in archive: {info.filename}", entry_name=info.filename
        )

    mode = entry_mode(info)
    try:
        with zip_file.open(info) as source:
            create_path(entry.relative_path, directory_mode(mode), root=root)
            if not entry.is_dir:
                write_file(source, info.file_size, entry.relative_path, mode, root=root)
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise CorruptArchiveEntryError(
            f"Corrupt archive entry {info.filename}: {exc}", entry_name=info.filename
        ) from exc
