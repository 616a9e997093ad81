"""
Command-line interface for the blog migrator.

Uses Typer to provide a CLI with options for the major configuration
settings. Supports loading .env files for API token configuration.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
import typer

from .config import get_api_token, load_config
from .core.errors import MigrationError
from .fetch.likes import ContentApiClient, collect_likes
from .runner import run_pipeline

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    export: Path | None = typer.Option(None, "--export", "-e", help="Entity export XML."),
    authority: Path | None = typer.Option(
        None, "--authority", "-a", help="Authority source (title:date::token lines)."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output directory. Deleted and recreated on every run."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    legacy_links: bool | None = typer.Option(
        None,
        "--legacy-links/--no-legacy-links",
        help="Stop rewriting a post's links at the first unresolved one.",
    ),
    link_prefix: str | None = typer.Option(
        None, "--link-prefix", help="URL prefix of legacy links, up to the token."
    ),
    draft: bool | None = typer.Option(None, "--draft/--no-draft", help="Front matter draft flag."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Migrate an entity export into front-matter documents.

    Parses the export, merges duplicate posts, applies authority dates,
    rewrites legacy links, and writes one document per post.

    Args:
        export: Path to the entity export XML
        authority: Path to the authority source
        output: Output directory (destructively recreated)
        config: Optional path to YAML config file
        progress: Whether to show progress bar
        legacy_links: Stop link rewriting at the first unresolved token
        link_prefix: URL prefix preceding the legacy link token
        draft: Value of the front matter draft flag
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
    """
    cfg = load_config(str(config) if config else None)

    if export is not None:
        cfg.input.export_path = str(export)
    if authority is not None:
        cfg.input.authority_path = str(authority)
    if output is not None:
        cfg.output.directory = str(output)
    if legacy_links is not None:
        cfg.links.legacy_parity = legacy_links
    if link_prefix:
        cfg.links.host_prefix = link_prefix
    if draft is not None:
        cfg.output.draft = draft
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    if not cfg.input.export_path:
        raise typer.BadParameter("an export path is required", param_hint="--export")
    if not cfg.input.authority_path:
        raise typer.BadParameter("an authority path is required", param_hint="--authority")

    try:
        result = run_pipeline(
            Path(cfg.input.export_path),
            Path(cfg.input.authority_path),
            Path(cfg.output.directory),
            cfg,
            show_progress=progress,
            console=console,
        )
    except (MigrationError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    console.print(f"Wrote {len(result.files)} posts to {escape(cfg.output.directory)}")


@app.command()
def likes(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    base_url: str | None = typer.Option(None, "--base-url", help="Content API host URL."),
    space_key: str | None = typer.Option(None, "--space-key", help="Space to list."),
    token_path: Path | None = typer.Option(None, "--token-path", help="Bearer token file."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
):
    """List blog posts with their like counts, fewest likes first."""
    if load_dotenv is not None:
        load_dotenv()

    cfg = load_config(str(config) if config else None)
    if base_url:
        cfg.fetch.base_url = base_url
    if space_key:
        cfg.fetch.space_key = space_key
    if token_path is not None:
        cfg.fetch.token_path = str(token_path)

    try:
        token = get_api_token(cfg.fetch)
        with ContentApiClient(cfg.fetch, token) as client:
            if progress:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("{task.description}"),
                    BarColumn(),
                    TaskProgressColumn(),
                    console=console,
                ) as bar:
                    task = bar.add_task("Loading blog list...", total=None)
                    entries = collect_likes(
                        client,
                        advance=lambda: bar.advance(task, 1),
                        on_listed=lambda total: bar.update(
                            task, total=total, description="Counting likes"
                        ),
                    )
            else:
                entries = collect_likes(client)
    except (httpx.HTTPError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Blog likes")
    table.add_column("Title")
    table.add_column("Date")
    table.add_column("Likes", justify="right")
    table.add_column("Permalink")
    for entry in entries:
        table.add_row(
            escape(entry.title),
            entry.published.isoformat() if entry.published else "",
            str(entry.likes),
            entry.permalink or "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
