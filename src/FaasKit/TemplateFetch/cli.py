# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.cli",
#   "purpose": "Typer CLI for pulling function templates from a repository archive.",
#   "sections": [
#     {"id": "clicontext", "name": "CliContext", "anchor": "class-clicontext", "kind": "class"},
#     {"id": "main", "name": "main", "anchor": "function-main", "kind": "function"},
#     {"id": "pull", "name": "pull", "anchor": "function-pull", "kind": "function"},
#     {"id": "version-cmd", "name": "version_cmd", "anchor": "function-version-cmd", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Typer CLI for pulling function templates from a repository archive.

Example:
    $ faas-template pull
    $ faas-template -v pull https://github.com/openfaas/templates --overwrite
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .errors import TemplateFetchError, UserConfigError
from .fetch import fetch_templates
from .logging_utils import setup_logging
from .settings import TemplateFetchSettings, load_settings

app = typer.Typer(
    name="faas-template",
    help="Fetch function templates from a git repository archive.",
    no_args_is_help=True,
    add_completion=False,
)

_console = Console()

_VERBOSITY_LEVELS = {0: None, 1: "INFO", 2: "DEBUG"}


class CliContext:
    """State shared between the global callback and subcommands."""

    def __init__(self, config: Optional[Path] = None, verbosity: int = 0) -> None:
        self.config = config
        self.verbosity = verbosity
        self.console = _console

    def settings(self, **overrides: object) -> TemplateFetchSettings:
        """Load settings, applying verbosity and per-command overrides."""

        level = _VERBOSITY_LEVELS.get(min(self.verbosity, 2))
        return load_settings(self.config, log_level=level, **overrides)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="FAAS_TEMPLATE_CONFIG",
        help="Path to a YAML settings file",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Fetch function templates from a git repository archive."""

    ctx.obj = CliContext(config=config, verbosity=verbosity)


@app.command()
def pull(
    ctx: typer.Context,
    repository_url: Optional[str] = typer.Argument(
        None, help="Repository URL; defaults to the configured repository"
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        help="Overwrite existing templates",
    ),
) -> None:
    """Download templates into ./template, one directory per language."""

    cli_ctx: CliContext = ctx.obj
    try:
        settings = cli_ctx.settings(repository_url=repository_url)
    except UserConfigError as exc:
        cli_ctx.console.print(f"[red]Error loading settings: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    setup_logging(level=settings.log_level, log_dir=settings.log_dir)

    try:
        result = fetch_templates(
            settings.repository_url,
            overwrite or settings.overwrite,
            archive_name=settings.archive_name,
            template_dir=settings.template_dir,
            timeout=settings.timeout_sec,
        )
    except (TemplateFetchError, httpx.HTTPError, OSError) as exc:
        cli_ctx.console.print(f"[red]✗ Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    if result.existing_languages:
        cli_ctx.console.print(
            f"[yellow]Skipped existing templates:[/yellow] {', '.join(result.existing_languages)}"
        )
    cli_ctx.console.print(
        f"[green]✓[/green] Fetched {len(result.fetched_languages)} template(s): "
        f"{', '.join(result.fetched_languages) or '-'}"
    )


@app.command("version")
def version_cmd() -> None:
    """Show version information."""

    typer.echo(f"faas-template {__version__}")


__all__ = ["app", "CliContext", "main", "pull", "version_cmd"]
