# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.writer",
#   "purpose": "Materialise archive entries on disk with their recorded permission bits",
#   "sections": [
#     {"id": "modes", "name": "Mode Helpers", "anchor": "MOD", "kind": "helpers"},
#     {"id": "paths", "name": "Directory Creation", "anchor": "DIR", "kind": "api"},
#     {"id": "files", "name": "File Writes", "anchor": "FIL", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Materialise archive entries on disk with their recorded permission bits."""

from __future__ import annotations

import os
import stat
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from .constants import COPY_CHUNK_SIZE, DEFAULT_DIR_MODE, DEFAULT_FILE_MODE
from .errors import TruncatedEntryError

__all__ = [
    "entry_mode",
    "directory_mode",
    "create_path",
    "copy_exact",
    "write_file",
]

_ZIP_UNIX_SYSTEM = 3

# --- Mode Helpers ----------------------------------------------------------------


def entry_mode(info: zipfile.ZipInfo) -> int:
    """Return the permission bits recorded for ``info``.

    Entries written without Unix attributes (or with all permission bits clear)
    fall back to ``0o777`` for directories and ``0o666`` for files.
    """

    perms = stat.S_IMODE(info.external_attr >> 16)
    if info.create_system == _ZIP_UNIX_SYSTEM and perms:
        return perms
    return DEFAULT_DIR_MODE if info.is_dir() else DEFAULT_FILE_MODE


def directory_mode(mode: int) -> int:
    """Add search permission wherever ``mode`` grants read permission."""

    perms = stat.S_IMODE(mode)
    return perms | ((perms & 0o444) >> 2)


# --- Directory Creation ----------------------------------------------------------


def create_path(relative_path: str, mode: int, *, root: Path) -> Path:
    """Create the directory chain holding ``relative_path`` beneath ``root``.

    For a directory entry (trailing ``/``) the chain includes the directory
    itself. Every directory created along the chain receives ``mode``;
    existing ones are left untouched.

    Returns:
        The directory that now holds (or is) ``relative_path``.

    Raises:
        FileExistsError: If a component of the chain exists but is not a
            directory.
    """

    parts = PurePosixPath(relative_path).parts
    if not relative_path.endswith("/"):
        parts = parts[:-1]

    os.makedirs(root, exist_ok=True)
    directory = Path(root)
    for part in parts:
        directory = directory / part
        # os.makedirs only applies mode to the leaf
        try:
            os.mkdir(directory, mode)
        except FileExistsError:
            if not directory.is_dir():
                raise
    return directory


# --- File Writes -----------------------------------------------------------------


def copy_exact(source: BinaryIO, target: BinaryIO, size: int) -> int:
    """Copy exactly ``size`` bytes from ``source`` to ``target``.

    Never requests more than the remaining byte count from ``source``.

    Raises:
        TruncatedEntryError: If ``source`` is exhausted early.
    """

    remaining = size
    while remaining > 0:
        chunk = source.read(min(COPY_CHUNK_SIZE, remaining))
        if not chunk:
            received = size - remaining
            raise TruncatedEntryError(
                f"short read: expected {size} bytes, received {received}",
                expected=size,
                received=received,
            )
        target.write(chunk)
        remaining -= len(chunk)
    return size


def write_file(source: BinaryIO, size: int, relative_path: str, mode: int, *, root: Path) -> Path:
    """Write ``size`` bytes from ``source`` to ``root / relative_path``.

    The file is created with ``mode`` when absent and truncated otherwise.
    """

    target = root / relative_path
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as handle:
        copy_exact(source, handle, size)
    return target
