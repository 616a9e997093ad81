"""
Main pipeline orchestration for the blog migrator.

This module coordinates the entire workflow:
1. Read the entity export and the authority source in full
2. Parse the export into ObjectRecords and the authority source into an index
3. Project records into drafts and bodies
4. Deduplicate drafts and resolve dates and bodies
5. Rewrite legacy links
6. Write the output documents

Every stage runs once, in order, over in-memory data. Fatal errors
(unreadable inputs, malformed export, malformed authority lines, an output
directory that cannot be created) propagate to the caller.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import AppConfig
from .core.dedup import canonicalize
from .core.links import LinkRewriter, rewrite_posts
from .core.errors import InputError
from .core.projector import project_records
from .core.types import RunReport
from .input.authority import build_authority_index, parse_authority
from .input.export_parser import parse_export
from .logging_utils import close_logging, log_event, setup_logging
from .output.writer import write_posts

STAGE_COUNT = 6


@dataclass
class MigrationResult:
    """Outcome of a successful run.

    Attributes:
        report: Counters and recoverable warnings
        files: Written documents, in chronological order
    """
    report: RunReport
    files: list[Path] = field(default_factory=list)


def build_rewriter(cfg: AppConfig) -> LinkRewriter:
    return LinkRewriter(
        host_prefix=cfg.links.host_prefix,
        token_pattern=cfg.links.token_pattern,
        link_template=cfg.links.template,
        legacy_parity=cfg.links.legacy_parity,
    )


def run_pipeline(
    export_path: Path,
    authority_path: Path,
    output_dir: Path,
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
) -> MigrationResult:
    """Run the complete migration pipeline.

    Args:
        export_path: Path to the entity export XML
        authority_path: Path to the authority source
        output_dir: Destination directory; deleted and recreated by the run
        cfg: Application configuration
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)

    Returns:
        MigrationResult with the run report and written files
    """
    console = console or Console()
    logger = setup_logging(cfg.logging, output_dir.resolve().parent)
    report = RunReport()
    rewriter = build_rewriter(cfg)

    log_event(
        logger,
        "Migration start",
        event="migration_start",
        export=str(export_path),
        authority=str(authority_path),
        output=str(output_dir),
    )

    progress = (
        Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        )
        if show_progress
        else None
    )

    try:
        with progress if progress is not None else nullcontext():
            stage_task = (
                progress.add_task("Stages", total=STAGE_COUNT) if progress is not None else None
            )

            def advance(description: str) -> None:
                if progress is not None and stage_task is not None:
                    progress.update(stage_task, advance=1, description=description)

            export_data = _read_bytes(export_path)
            authority_text = _read_text(authority_path, cfg.input.encoding)
            advance("Read inputs")

            records = parse_export(export_data)
            entries = parse_authority(authority_text.splitlines())
            authority = build_authority_index(entries)
            report.records = len(records)
            report.authority_entries = len(entries)
            advance("Parse")

            projection = project_records(records, report)
            report.drafts = len(projection.drafts)
            report.bodies = len(projection.bodies)
            report.unrecognized = projection.unrecognized
            advance("Project")

            posts = canonicalize(projection.drafts, projection.bodies, authority, report)
            advance("Canonicalize")

            posts = rewrite_posts(posts, authority, rewriter, report)
            advance("Rewrite links")

            files = write_posts(posts, output_dir, cfg.output, report)
            advance("Write")

        log_event(
            logger,
            "Migration complete",
            event="migration_complete",
            output=str(output_dir),
            posts=report.posts,
            files=report.files_written,
            warnings=len(report.warnings),
        )
        _render_report(report, console)
        return MigrationResult(report=report, files=files)
    finally:
        close_logging(logger)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise InputError(path, exc.strerror or str(exc)) from exc


def _read_text(path: Path, encoding: str) -> str:
    try:
        with open(path, encoding=encoding) as fh:
            return fh.read()
    except OSError as exc:
        raise InputError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise InputError(path, f"not valid {encoding}: {exc.reason} at byte {exc.start}") from exc


def _render_report(report: RunReport, console: Console) -> None:
    """Display run statistics to the console."""
    table = Table(title="Migration summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Records", str(report.records))
    table.add_row("Drafts", str(report.drafts))
    table.add_row("Bodies", str(report.bodies))
    table.add_row("Unrecognized", str(report.unrecognized))
    table.add_row("Authority entries", str(report.authority_entries))
    table.add_row("Posts", str(report.posts))
    table.add_row("Date overrides", str(report.date_overrides))
    table.add_row("Links rewritten", str(report.links_rewritten))
    table.add_row("Files written", str(report.files_written))
    table.add_row("Warnings", str(len(report.warnings)))
    console.print(table)
