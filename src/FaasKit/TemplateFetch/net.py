# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.net",
#   "purpose": "Provide timeout-bound HTTPX clients for template networking",
#   "sections": [
#     {"id": "constants", "name": "Constants & globals", "anchor": "CONST", "kind": "constants"},
#     {"id": "helpers", "name": "Client construction helpers", "anchor": "HELP", "kind": "helpers"},
#     {"id": "api", "name": "Public API", "anchor": "API", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Timeout-bound HTTPX clients used by the template acquirer.

Each call to :func:`make_http_client` returns a fresh client that the caller
owns and must close (typically via ``with``). Tests swap the construction step
through :func:`configure_http_client` so no real network access is needed.
"""

from __future__ import annotations

import logging
import ssl
import threading
from typing import Callable, Optional

import certifi
import httpx

from . import __version__
from .constants import DEFAULT_FETCH_TIMEOUT_SEC

LOGGER = logging.getLogger("FaasKit.TemplateFetch.net")

# --- Constants & globals -------------------------------------------------------

USER_AGENT = f"faas-template/{__version__}"

ClientFactory = Callable[[Optional[float]], httpx.Client]

_CLIENT_LOCK = threading.RLock()
_CLIENT_FACTORY: Optional[ClientFactory] = None

# --- Client construction helpers ----------------------------------------------


def _build_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.load_verify_locations(certifi.where())
    return context


def _build_timeout(timeout: Optional[float]) -> httpx.Timeout:
    if timeout is None:
        return httpx.Timeout(DEFAULT_FETCH_TIMEOUT_SEC)
    return httpx.Timeout(timeout)


def _default_factory(timeout: Optional[float]) -> httpx.Client:
    return httpx.Client(
        timeout=_build_timeout(timeout),
        verify=_build_ssl_context(),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


# --- Public API ----------------------------------------------------------------


def make_http_client(timeout: Optional[float] = None) -> httpx.Client:
    """Return a new HTTPX client whose requests are bounded by ``timeout`` seconds.

    Args:
        timeout: Overall per-phase timeout in seconds. ``None`` applies the
            default archive fetch timeout.

    Returns:
        A client the caller is responsible for closing.
    """

    with _CLIENT_LOCK:
        factory = _CLIENT_FACTORY or _default_factory
    client = factory(timeout)
    LOGGER.debug("HTTP client created", extra={"stage": "acquire", "timeout": timeout})
    return client


def configure_http_client(factory: Optional[ClientFactory]) -> None:
    """Install ``factory`` as the client constructor (``None`` restores the default)."""

    global _CLIENT_FACTORY  # noqa: PLW0603

    with _CLIENT_LOCK:
        _CLIENT_FACTORY = factory


def reset_http_client() -> None:
    """Restore the default client constructor (primarily for testing)."""

    configure_http_client(None)


__all__ = [
    "USER_AGENT",
    "make_http_client",
    "configure_http_client",
    "reset_http_client",
]
