"""Tests for the Typer CLI: pull, version, settings integration, exit codes."""

from __future__ import annotations

import httpx
from typer.testing import CliRunner

from FaasKit.TemplateFetch import __version__
from FaasKit.TemplateFetch.cli import app
from FaasKit.TemplateFetch.testing import (
    build_template_archive,
    corrupt_member_crc,
    use_mock_http_client,
)

runner = CliRunner()


def _transport(payload: bytes, requests: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(200, content=payload)

    return httpx.MockTransport(handler)


class TestCliBasics:
    """Help and version output."""

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "pull" in result.stdout
        assert "version" in result.stdout

    def test_version_command(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"faas-template {__version__}" in result.stdout


class TestPull:
    """The pull command against a mocked archive endpoint."""

    def test_pull_fetches_templates(self, workdir, go_node_members):
        requests = []
        with use_mock_http_client(_transport(build_template_archive(None, go_node_members), requests)):
            result = runner.invoke(app, ["pull", "https://github.com/openfaas/templates/"])

        assert result.exit_code == 0, result.stdout
        assert requests == ["https://github.com/openfaas/templates/archive/master.zip"]
        assert "Fetched 2 template(s): go, node" in result.stdout
        assert (workdir / "template/go/handler.go").is_file()
        assert not (workdir / "master.zip").exists()

    def test_pull_reports_skipped_languages(self, workdir, go_node_members):
        (workdir / "template" / "node").mkdir(parents=True)
        with use_mock_http_client(_transport(build_template_archive(None, go_node_members), [])):
            result = runner.invoke(app, ["pull", "https://github.com/openfaas/templates"])

        assert result.exit_code == 0, result.stdout
        assert "Skipped existing templates: node" in result.stdout
        assert not (workdir / "template/node/handler.js").exists()

    def test_pull_overwrite_flag(self, workdir, go_node_members):
        (workdir / "template" / "node").mkdir(parents=True)
        with use_mock_http_client(_transport(build_template_archive(None, go_node_members), [])):
            result = runner.invoke(
                app, ["pull", "https://github.com/openfaas/templates", "--overwrite"]
            )

        assert result.exit_code == 0, result.stdout
        assert (workdir / "template/node/handler.js").is_file()

    def test_pull_uses_repository_from_config(self, workdir, go_node_members):
        config = workdir / "faas-template.yaml"
        config.write_text("repository_url: https://example.com/custom-templates\n")
        requests = []
        with use_mock_http_client(_transport(build_template_archive(None, go_node_members), requests)):
            result = runner.invoke(app, ["--config", str(config), "pull"])

        assert result.exit_code == 0, result.stdout
        assert requests == ["https://example.com/custom-templates/archive/master.zip"]

    def test_pull_http_failure_exits_non_zero(self, workdir):
        with use_mock_http_client(httpx.MockTransport(lambda request: httpx.Response(404))):
            result = runner.invoke(app, ["pull", "https://github.com/openfaas/missing"])

        assert result.exit_code == 1
        assert "404" in result.stdout
        assert not (workdir / "master.zip").exists()

    def test_pull_invalid_config_exits_non_zero(self, workdir):
        config = workdir / "bad.yaml"
        config.write_text("not_a_setting: true\n")
        result = runner.invoke(app, ["-c", str(config), "pull"])

        assert result.exit_code == 1
        assert "not_a_setting" in result.stdout

    def test_pull_corrupt_archive_exits_non_zero(self, workdir, go_node_members):
        payload = corrupt_member_crc(
            build_template_archive(None, go_node_members), "template/go/handler.go"
        )
        with use_mock_http_client(_transport(payload, [])):
            result = runner.invoke(app, ["pull", "https://github.com/openfaas/templates"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Corrupt archive entry" in result.stdout
