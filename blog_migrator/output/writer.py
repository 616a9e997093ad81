"""
Output of canonical posts as front-matter documents.

Posts are written in chronological order, one file per post, named after
the publish date. The front matter header is rendered with a Jinja2
template shipped in ``templates/post.html``; the body follows verbatim.
"""

from __future__ import annotations

import logging
from pathlib import Path
import shutil
from typing import Iterable

from jinja2 import Environment, FileSystemLoader

from ..config import OutputConfig
from ..core.errors import OutputError
from ..core.types import CanonicalPost, RunReport
from ..logging_utils import log_event

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "post.html"

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=False,
    keep_trailing_newline=False,
)


def date_text(post: CanonicalPost) -> str:
    """Return the publish date as zero-padded ``YYYY-MM-DD``."""
    return post.publish_date.date().isoformat()


def sort_posts(posts: list[CanonicalPost]) -> list[CanonicalPost]:
    """Sort posts by publish date; posts with equal dates keep their order."""
    return sorted(posts, key=lambda post: post.publish_date)


def assign_file_names(
    posts: list[CanonicalPost],
    extension: str = ".html",
    existing: Iterable[str] = (),
) -> list[str]:
    """Derive a unique file name for each post, in order.

    The base name is the publish date (``YYYY-MM-DD``). When it is already
    taken, either by an earlier post in this run or by a file in ``existing``,
    ``_1``, ``_2``, ... are tried until a free name is found.

    Examples:
        Three posts dated 2022-02-02 get ``2022-02-02.html``,
        ``2022-02-02_1.html`` and ``2022-02-02_2.html``.
    """
    taken = set(existing)
    names: list[str] = []
    for post in posts:
        base = date_text(post)
        name = f"{base}{extension}"
        suffix = 0
        while name in taken:
            suffix += 1
            name = f"{base}_{suffix}{extension}"
        taken.add(name)
        names.append(name)
    return names


def render_post(post: CanonicalPost, draft: bool = False) -> str:
    """Render the front matter header followed by the post body."""
    template = _env.get_template(TEMPLATE_NAME)
    return template.render(
        title=post.title,
        date=date_text(post),
        draft="true" if draft else "false",
        body=post.body,
    )


def prepare_output_dir(output_dir: Path) -> None:
    """Delete and recreate the output directory.

    Every run starts from an empty directory: anything already at
    ``output_dir`` is removed, including files not produced by this tool.

    Raises:
        OutputError: If the directory cannot be removed or created
    """
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as exc:
        raise OutputError(f"Cannot prepare output directory {output_dir}: {exc}") from exc


def write_posts(
    posts: list[CanonicalPost],
    output_dir: Path,
    cfg: OutputConfig,
    report: RunReport | None = None,
) -> list[Path]:
    """Write posts chronologically into a freshly recreated directory.

    Args:
        posts: Canonical posts, in reconciliation order
        output_dir: Destination directory, wiped before writing
        cfg: Output settings (extension, draft flag)
        report: Optional run report receiving the written file count

    Returns:
        Paths of the written documents, in write order
    """
    prepare_output_dir(output_dir)

    ordered = sort_posts(posts)
    existing = [path.name for path in output_dir.iterdir()]
    names = assign_file_names(ordered, cfg.extension, existing)

    written: list[Path] = []
    for idx, (post, name) in enumerate(zip(ordered, names)):
        path = output_dir / name
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(render_post(post, cfg.draft))
        log_event(
            logger,
            f"{idx}: `{post.title}` published on {date_text(post)}",
            event="post_written",
            title=post.title,
            path=str(path),
        )
        written.append(path)

    if report is not None:
        report.files_written = len(written)
    return written
