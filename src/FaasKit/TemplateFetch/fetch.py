# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.fetch",
#   "purpose": "Run a complete acquire, expand, and clean up cycle",
#   "sections": [
#     {"id": "fetch-templates", "name": "fetch_templates", "anchor": "function-fetch-templates", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Run a complete acquire, expand, and clean up cycle."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .acquire import fetch_master_zip
from .cleanup import remove_archive
from .constants import (
    ARCHIVE_NAME,
    DEFAULT_FETCH_TIMEOUT_SEC,
    DEFAULT_TEMPLATE_REPOSITORY,
    TEMPLATE_DIRECTORY,
)
from .expand import ExpansionResult, expand_templates_from_zip
from .policy import LanguagePolicyCache

LOGGER = logging.getLogger("FaasKit.TemplateFetch.fetch")

__all__ = ["fetch_templates"]


def fetch_templates(
    template_url: Optional[str] = None,
    overwrite: bool = False,
    *,
    destination: Optional[Path] = None,
    archive_name: str = ARCHIVE_NAME,
    template_dir: str = TEMPLATE_DIRECTORY,
    timeout: float = DEFAULT_FETCH_TIMEOUT_SEC,
    logger: Optional[logging.Logger] = None,
) -> ExpansionResult:
    """Fetch language templates from ``template_url`` into ``destination``.

    An empty ``template_url`` selects the default repository. The archive is
    staged inside ``destination`` and removed once expansion succeeds.

    Returns:
        The :class:`ExpansionResult` of the run.

    Raises:
        DownloadFailure: If the archive endpoint does not answer with 200.
        httpx.HTTPError: On transport failures.
        ArchiveOpenError: If the staged archive is not a zip container.
        OSError: On expansion or cleanup failures. A cleanup failure is raised
            even though every template was already written.
    """

    log = logger or LOGGER
    url = template_url or DEFAULT_TEMPLATE_REPOSITORY
    root = Path(destination) if destination is not None else Path(".")
    archive = root / archive_name

    try:
        fetch_master_zip(url, archive_path=archive, timeout=timeout, logger=log)
    except Exception:
        try:
            remove_archive(archive, logger=log)
        except OSError as cleanup_exc:
            log.debug(
                "archive cleanup after failed download: %s",
                cleanup_exc,
                extra={"stage": "cleanup", "archive": str(archive)},
            )
        raise

    log.info(
        "Attempting to expand templates from %s",
        archive,
        extra={"stage": "fetch", "archive": str(archive)},
    )
    result = expand_templates_from_zip(
        archive,
        overwrite,
        destination=root,
        template_dir=template_dir,
        policy=LanguagePolicyCache(root / template_dir),
        logger=log,
    )

    if result.existing_languages:
        log.info(
            "Cannot overwrite the following %d directories: %s",
            len(result.existing_languages),
            result.existing_languages,
            extra={"stage": "fetch"},
        )
    log.info(
        "Fetched %d template(s) : %s from %s",
        len(result.fetched_languages),
        result.fetched_languages,
        url,
        extra={"stage": "fetch"},
    )

    remove_archive(archive, logger=log)
    return result
