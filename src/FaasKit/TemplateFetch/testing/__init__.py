"""Testing utilities for exercising the template fetcher without a network.

Provides a context manager that routes every client built by
:func:`FaasKit.TemplateFetch.net.make_http_client` through an HTTPX transport,
and a builder for branch-style zip archives.
"""

from __future__ import annotations

import contextlib
import io
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import httpx

from ..net import configure_http_client, reset_http_client

__all__ = [
    "ArchiveMember",
    "build_template_archive",
    "corrupt_member_crc",
    "use_mock_http_client",
]


@contextlib.contextmanager
def use_mock_http_client(transport: httpx.BaseTransport, **client_kwargs) -> Iterator[List[Optional[float]]]:
    """Temporarily build HTTP clients backed by ``transport``.

    Yields:
        A list that records the timeout requested for every client built.
    """

    timeouts: List[Optional[float]] = []

    def _factory(timeout: Optional[float]) -> httpx.Client:
        timeouts.append(timeout)
        return httpx.Client(transport=transport, timeout=timeout, **client_kwargs)

    configure_http_client(_factory)
    try:
        yield timeouts
    finally:
        reset_http_client()


@dataclass
class ArchiveMember:
    """Entry written by :func:`build_template_archive`.

    Names ending in ``/`` become directory entries. ``content`` is ignored for
    directories.
    """

    name: str
    content: Union[bytes, str] = b""
    mode: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.name.endswith("/")

    def payload(self) -> bytes:
        if isinstance(self.content, str):
            return self.content.encode("utf-8")
        return self.content


def _zip_info(member: ArchiveMember, root: str) -> zipfile.ZipInfo:
    name = f"{root}/{member.name}" if root else member.name
    info = zipfile.ZipInfo(name, date_time=(2020, 1, 1, 0, 0, 0))
    info.create_system = 3
    if member.is_dir:
        mode = member.mode if member.mode is not None else 0o755
        info.external_attr = ((stat.S_IFDIR | mode) << 16) | 0x10
    else:
        mode = member.mode if member.mode is not None else 0o644
        info.external_attr = (stat.S_IFREG | mode) << 16
        info.compress_type = zipfile.ZIP_DEFLATED
    return info


def build_template_archive(
    destination: Optional[Path],
    members: Iterable[ArchiveMember],
    *,
    root: str = "root",
) -> bytes:
    """Build a zip archive whose entries sit under the synthetic ``root`` directory.

    The archive is written to ``destination`` when given and always returned
    as bytes so it can double as an HTTP response body.
    """

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        if root:
            root_info = zipfile.ZipInfo(f"{root}/", date_time=(2020, 1, 1, 0, 0, 0))
            root_info.create_system = 3
            root_info.external_attr = ((stat.S_IFDIR | 0o755) << 16) | 0x10
            archive.writestr(root_info, b"")
        for member in members:
            archive.writestr(_zip_info(member, root), b"" if member.is_dir else member.payload())
    data = buffer.getvalue()
    if destination is not None:
        Path(destination).write_bytes(data)
    return data


def corrupt_member_crc(data: bytes, name: str, *, root: str = "root") -> bytes:
    """Return ``data`` with the central-directory CRC of member ``name`` flipped.

    The member still opens, but reading it to the end fails the CRC check.
    """

    full_name = (f"{root}/{name}" if root else name).encode("utf-8")
    central = data.find(b"PK\x01\x02")
    name_offset = data.find(full_name, central)
    if central < 0 or name_offset < 0:
        raise ValueError(f"{name!r} not found in archive central directory")
    # central header: signature(4) ... crc32 at 16, file name at 46
    header = name_offset - 46
    corrupted = bytearray(data)
    for index in range(header + 16, header + 20):
        corrupted[index] ^= 0xFF
    return bytes(corrupted)
