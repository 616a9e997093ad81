"""
Post deduplication and canonicalization.

This module reconciles projected drafts into canonical posts:
1. Merge drafts sharing a title, keeping the most recently created one
2. Override the publish date from the authority source when it knows the title
3. Join each post to its body through the draft's body reference
"""

from __future__ import annotations

from datetime import datetime, time
import logging

from ..logging_utils import warn_event
from .types import AuthorityIndex, CanonicalPost, PostDraft, RunReport

logger = logging.getLogger(__name__)


def merge_drafts(drafts: list[PostDraft]) -> list[PostDraft]:
    """Collapse drafts that share a title.

    For each title the draft with the latest creation date is kept. A draft
    only replaces the stored one when it is strictly later, so exact ties
    keep the first draft seen. Drafts with an empty title are dropped.

    Args:
        drafts: Drafts in export order

    Returns:
        One draft per title, ordered by the first appearance of each title
    """
    by_title: dict[str, PostDraft] = {}
    for draft in drafts:
        if not draft.title:
            continue
        existing = by_title.get(draft.title)
        if existing is None or existing.creation_date < draft.creation_date:
            by_title[draft.title] = draft
    return list(by_title.values())


def resolve_publish_date(draft: PostDraft, authority: AuthorityIndex) -> tuple[datetime, bool]:
    """Return the publish date for a draft and whether the authority supplied it."""
    canonical = authority.title_to_date.get(draft.title)
    if canonical is None:
        return draft.creation_date, False
    return datetime.combine(canonical, time.min), True


def canonicalize(
    drafts: list[PostDraft],
    bodies: dict[str, str],
    authority: AuthorityIndex,
    report: RunReport | None = None,
) -> list[CanonicalPost]:
    """Deduplicate drafts and join them with dates and bodies.

    A missing body never aborts the run: the post is emitted with an empty
    body and a warning naming its title is recorded.

    Args:
        drafts: Projected drafts in export order
        bodies: Body text keyed by fragment id
        authority: Title and token lookups from the authority source
        report: Optional run report receiving warnings and counters

    Returns:
        One CanonicalPost per distinct non-empty title
    """
    posts: list[CanonicalPost] = []
    for draft in merge_drafts(drafts):
        publish_date, overridden = resolve_publish_date(draft, authority)
        if overridden and report is not None:
            report.date_overrides += 1

        body = bodies.get(draft.body_ref)
        if body is None:
            warn_event(
                logger,
                report,
                f"Couldn't find a body for post `{draft.title}`",
                event="missing_body",
                title=draft.title,
            )
            body = ""

        posts.append(CanonicalPost(title=draft.title, body=body, publish_date=publish_date))

    if report is not None:
        report.posts = len(posts)
    return posts
