"""
Blog Migrator - entity export to static-site post converter.

This package reads a hibernate-generic entity export (such as a Confluence
``entities.xml``) together with an authority file of publish dates, and
writes one front-matter document per blog post.

Main entry point is the CLI via `blog-migrator run` command.

Example:
    $ blog-migrator run -e entities.xml -a blogDates.txt -o posts/
"""

__all__ = ["__version__", "parse_export", "run_pipeline", "LinkRewriter"]
__version__ = "0.1.0"

from .core.links import LinkRewriter
from .input.export_parser import parse_export
from .runner import run_pipeline
