# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.classify",
#   "purpose": "Classify archive entry names relative to the template tree",
#   "sections": [
#     {"id": "entrykind", "name": "EntryKind", "anchor": "class-entrykind", "kind": "class"},
#     {"id": "classifiedentry", "name": "ClassifiedEntry", "anchor": "class-classifiedentry", "kind": "class"},
#     {"id": "strip-archive-root", "name": "strip_archive_root", "anchor": "function-strip-archive-root", "kind": "function"},
#     {"id": "classify-entry", "name": "classify_entry", "anchor": "function-classify-entry", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Classify archive entry names relative to the template tree.

Branch archives wrap the repository in a synthetic top-level directory
(``faas-cli-master/``). Once that segment is removed, only names under
``template/`` matter, and each of those is either the bare ``template/`` marker,
a language root (``template/<language>/``), or something nested beneath a
language.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import ROOT_LANGUAGE_DIR_SPLIT_COUNT, TEMPLATE_DIRECTORY

__all__ = ["EntryKind", "ClassifiedEntry", "strip_archive_root", "classify_entry"]


class EntryKind(str, Enum):
    """Classification assigned to an archive entry."""

    NOT_TEMPLATE = "not_template"
    ROOT_MARKER = "root_marker"
    LANGUAGE_ROOT = "language_root"
    LANGUAGE_CHILD = "language_child"


@dataclass(frozen=True)
class ClassifiedEntry:
    """Archive entry name annotated with its place in the template tree."""

    kind: EntryKind
    relative_path: str
    language: Optional[str] = None
    is_dir: bool = False

    @property
    def eligible(self) -> bool:
        """True for entries that belong to a language tree."""

        return self.kind in (EntryKind.LANGUAGE_ROOT, EntryKind.LANGUAGE_CHILD)


def strip_archive_root(name: str) -> str:
    """Drop the first path segment of ``name``.

    Names without a separator are returned unchanged.

    Examples:
        >>> strip_archive_root("faas-cli-master/template/go/")
        'template/go/'
    """

    return name[name.find("/") + 1 :]


def classify_entry(name: str, *, template_dir: str = TEMPLATE_DIRECTORY) -> ClassifiedEntry:
    """Classify the archive entry ``name``.

    Examples:
        >>> classify_entry("root/template/go/").kind
        <EntryKind.LANGUAGE_ROOT: 'language_root'>
        >>> classify_entry("root/README.md").kind
        <EntryKind.NOT_TEMPLATE: 'not_template'>
    """

    relative_path = strip_archive_root(name)
    is_dir = relative_path.endswith("/")

    if not relative_path.startswith(f"{template_dir}/"):
        return ClassifiedEntry(EntryKind.NOT_TEMPLATE, relative_path, is_dir=is_dir)

    segments = relative_path.split("/")
    if len(segments) < ROOT_LANGUAGE_DIR_SPLIT_COUNT:
        # template/ itself, or a loose file directly inside it
        return ClassifiedEntry(EntryKind.ROOT_MARKER, relative_path, is_dir=is_dir)

    language = segments[1]
    if len(segments) == ROOT_LANGUAGE_DIR_SPLIT_COUNT and is_dir:
        return ClassifiedEntry(EntryKind.LANGUAGE_ROOT, relative_path, language, is_dir)
    return ClassifiedEntry(EntryKind.LANGUAGE_CHILD, relative_path, language, is_dir)
