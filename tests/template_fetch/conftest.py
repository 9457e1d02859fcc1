"""Shared fixtures for the template_fetch test suite."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

import pytest

from FaasKit.TemplateFetch.net import reset_http_client
from FaasKit.TemplateFetch.testing import ArchiveMember


@pytest.fixture(autouse=True)
def _isolate_runtime(monkeypatch):
    """Reset process-wide state touched by the fetcher between tests."""

    old_umask = os.umask(0o022)
    for name in list(os.environ):
        if name.startswith("FAAS_TEMPLATE_"):
            monkeypatch.delenv(name, raising=False)
    try:
        yield
    finally:
        os.umask(old_umask)
        reset_http_client()
        logger = logging.getLogger("FaasKit.TemplateFetch")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test inside an empty working directory."""

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def go_node_members() -> List[ArchiveMember]:
    """Archive layout with a Go and a Node template."""

    return [
        ArchiveMember("README.md", "# templates\n"),
        ArchiveMember("template/"),
        ArchiveMember("template/go/"),
        ArchiveMember("template/go/handler.go", "package function\n", mode=0o644),
        ArchiveMember("template/node/"),
        ArchiveMember("template/node/handler.js", "module.exports = () => {}\n", mode=0o755),
    ]
