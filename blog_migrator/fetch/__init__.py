"""Content API access for the likes report."""

from .likes import BlogEntry, ContentApiClient, collect_likes

__all__ = ["BlogEntry", "ContentApiClient", "collect_likes"]
