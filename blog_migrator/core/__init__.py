"""
Core domain models and reconciliation logic.

This package contains the data types and the stages that turn projected
export records into canonical posts, independent of how inputs are read or
outputs are written.
"""

from .types import (
    AuthorityEntry,
    AuthorityIndex,
    BodyFragment,
    CanonicalPost,
    ObjectRecord,
    PostDraft,
    Property,
    RunReport,
    Unrecognized,
)
from .dedup import canonicalize, merge_drafts
from .links import LinkRewriter, rewrite_posts
from .projector import project_record, project_records

__all__ = [
    "AuthorityEntry",
    "AuthorityIndex",
    "BodyFragment",
    "CanonicalPost",
    "ObjectRecord",
    "PostDraft",
    "Property",
    "RunReport",
    "Unrecognized",
    "canonicalize",
    "merge_drafts",
    "LinkRewriter",
    "rewrite_posts",
    "project_record",
    "project_records",
]
