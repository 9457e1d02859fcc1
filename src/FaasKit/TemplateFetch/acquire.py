# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.acquire",
#   "purpose": "Download the repository master archive, reusing a staged local copy",
#   "sections": [
#     {"id": "archive-url", "name": "archive_url", "anchor": "function-archive-url", "kind": "function"},
#     {"id": "fetch-master-zip", "name": "fetch_master_zip", "anchor": "function-fetch-master-zip", "kind": "function"},
#     {"id": "write-archive", "name": "_write_archive", "anchor": "function-write-archive", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Download the repository master archive, reusing a staged local copy.

The archive is staged under a well-known name in the working directory. When a
file of that name already exists it is trusted as-is and no request is made;
callers that need a fresh copy remove it first.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import httpx

from .constants import (
    ARCHIVE_FILE_MODE,
    ARCHIVE_NAME,
    ARCHIVE_URL_SUFFIX,
    DEFAULT_FETCH_TIMEOUT_SEC,
)
from .errors import DownloadFailure
from .net import make_http_client

LOGGER = logging.getLogger("FaasKit.TemplateFetch.acquire")

__all__ = ["archive_url", "fetch_master_zip"]


def archive_url(template_url: str) -> str:
    """Return the master archive URL for ``template_url``.

    Examples:
        >>> archive_url("https://github.com/openfaas/templates/")
        'https://github.com/openfaas/templates/archive/master.zip'
    """

    return template_url.rstrip("/") + ARCHIVE_URL_SUFFIX


def fetch_master_zip(
    template_url: str,
    *,
    archive_path: Optional[Path] = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT_SEC,
    client: Optional[httpx.Client] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Obtain a local copy of the master archive for ``template_url``.

    Args:
        template_url: Repository URL; trailing slashes are ignored.
        archive_path: Staging location, ``./master.zip`` by default.
        timeout: Request timeout in seconds for a client built here.
        client: Optional pre-built client; it is left open for the caller.
        logger: Logger receiving progress messages.

    Returns:
        Path to the local archive.

    Raises:
        DownloadFailure: If the server answers with anything other than 200.
        httpx.HTTPError: On transport failures such as DNS errors, refused
            connections, or timeouts. No retry is attempted.
        OSError: If the archive cannot be written locally.
    """

    log = logger or LOGGER
    archive = Path(archive_path) if archive_path is not None else Path(ARCHIVE_NAME)

    if archive.exists():
        log.debug(
            "reusing staged archive",
            extra={"stage": "acquire", "archive": str(archive)},
        )
        return archive

    url = archive_url(template_url)
    if client is not None:
        payload = _download(client, url, log)
    else:
        with make_http_client(timeout) as owned_client:
            payload = _download(owned_client, url, log)

    log.info(
        "Writing %dKb to %s",
        len(payload) // 1024,
        archive,
        extra={"stage": "acquire", "bytes": len(payload)},
    )
    try:
        _write_archive(archive, payload)
    except OSError as exc:
        log.error(str(exc), extra={"stage": "acquire", "archive": str(archive)})
        raise
    return archive


def _download(client: httpx.Client, url: str, log: logging.Logger) -> bytes:
    """Issue the GET request and return the fully buffered body."""

    log.info("HTTP GET %s", url, extra={"stage": "acquire", "url": url})
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        log.error(str(exc), extra={"stage": "acquire", "url": url})
        raise

    if response.status_code != httpx.codes.OK:
        failure = DownloadFailure(
            f"{url} is not valid, status code {response.status_code}",
            url=url,
            status_code=response.status_code,
        )
        log.error(str(failure), extra={"stage": "acquire", "url": url})
        raise failure
    return response.content


def _write_archive(archive: Path, payload: bytes) -> None:
    """Write ``payload`` to ``archive`` with owner-only permissions."""

    fd = os.open(archive, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, ARCHIVE_FILE_MODE)
    with os.fdopen(fd, "wb") as handle:
        handle.write(payload)
