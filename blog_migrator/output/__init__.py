"""Output module for writing migrated posts."""

from .writer import render_post, write_posts

__all__ = ["render_post", "write_posts"]
