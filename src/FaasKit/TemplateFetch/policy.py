"""Per-run cache of language write decisions.

A language tree may contain hundreds of archive entries. The decision whether
that tree may be written is taken once, when the language is first seen, and
reused for every later entry of the same language so the whole tree is handled
consistently even if the filesystem changes mid-run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional

LOGGER = logging.getLogger("FaasKit.TemplateFetch.policy")

__all__ = ["LanguagePolicyCache"]


class LanguagePolicyCache:
    """Memoise "may this language's tree be written?" for one expansion run.

    Attributes:
        template_root: Local directory holding one subdirectory per language.

    Examples:
        >>> cache = LanguagePolicyCache(Path("template"), exists=lambda path: False)
        >>> cache.decide("go", overwrite=False)
        True
    """

    def __init__(
        self,
        template_root: Path,
        *,
        exists: Callable[[Path], bool] = os.path.exists,
    ) -> None:
        self.template_root = Path(template_root)
        self._exists = exists
        self._decisions: Dict[str, bool] = {}

    def decide(self, language: str, overwrite: bool) -> bool:
        """Return whether ``language`` may be written.

        ``overwrite`` is consulted only the first time ``language`` is seen;
        later calls return the cached answer unchanged. An empty language name
        is never writable and is not cached.
        """

        if not language:
            return False
        cached = self._decisions.get(language)
        if cached is not None:
            return cached

        writable = overwrite or not self._exists(self.template_root / language)
        self._decisions[language] = writable
        LOGGER.debug(
            "language decision recorded",
            extra={"stage": "expand", "language": language, "writable": writable},
        )
        return writable

    def cached(self, language: str) -> Optional[bool]:
        """Return the recorded decision for ``language`` or ``None`` if undecided."""

        return self._decisions.get(language)

    def __contains__(self, language: object) -> bool:
        return language in self._decisions

    def __len__(self) -> int:
        return len(self._decisions)
