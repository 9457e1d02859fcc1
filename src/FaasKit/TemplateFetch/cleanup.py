"""Removal of the staged template archive."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOGGER = logging.getLogger("FaasKit.TemplateFetch.cleanup")

__all__ = ["remove_archive"]


def remove_archive(
    archive: Path, *, missing_ok: bool = False, logger: Optional[logging.Logger] = None
) -> None:
    """Delete the staged archive at ``archive``.

    Args:
        archive: Path returned by the acquirer.
        missing_ok: Treat an absent archive as already cleaned up.
        logger: Logger receiving progress messages.

    Raises:
        FileNotFoundError: If ``archive`` does not exist and ``missing_ok`` is
            false.
        OSError: If the archive exists but cannot be removed.
    """

    log = logger or LOGGER
    log.info("Cleaning up zip file...", extra={"stage": "cleanup", "archive": str(archive)})
    Path(archive).unlink(missing_ok=missing_ok)
