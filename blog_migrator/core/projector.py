"""
Projection of generic ObjectRecords into typed pipeline values.

Each record is classified once by its class discriminant:
- "BlogPost" becomes a PostDraft
- "BodyContent" becomes a BodyFragment
- anything else becomes Unrecognized and is carried no further
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging

from ..logging_utils import warn_event
from .types import (
    BodyFragment,
    ObjectRecord,
    PostDraft,
    Projected,
    RunReport,
    Unrecognized,
)

logger = logging.getLogger(__name__)

BLOG_POST_CLASS = "BlogPost"
BODY_CONTENT_CLASS = "BodyContent"
CREATION_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Projection:
    """Typed output of the projection stage.

    Attributes:
        drafts: PostDrafts in export order
        bodies: BodyFragment text keyed by fragment id
        unrecognized: Number of records that were not projected
    """
    drafts: list[PostDraft] = field(default_factory=list)
    bodies: dict[str, str] = field(default_factory=dict)
    unrecognized: int = 0


def project_record(record: ObjectRecord, report: RunReport | None = None) -> Projected:
    """Classify a single record into its typed view."""
    if record.cls == BLOG_POST_CLASS:
        return _project_blog_post(record, report)
    if record.cls == BODY_CONTENT_CLASS:
        return _project_body_content(record)
    return Unrecognized(record=record)


def project_records(records: list[ObjectRecord], report: RunReport | None = None) -> Projection:
    """Project every record, collecting drafts and bodies.

    When two BodyContent records share an id the later one wins.
    """
    projection = Projection()
    for record in records:
        projected = project_record(record, report)
        if isinstance(projected, PostDraft):
            projection.drafts.append(projected)
        elif isinstance(projected, BodyFragment):
            projection.bodies[projected.id] = projected.text
        else:
            projection.unrecognized += 1
    return projection


def normalize_title(title: str) -> str:
    """Replace double quotes so the title fits in a quoted header field."""
    return title.replace('"', "'")


def parse_creation_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS`` with an optional fractional-seconds suffix.

    Raises:
        ValueError: If the value does not match the format
    """
    raw = value.strip()
    head, dot, fraction = raw.partition(".")
    parsed = datetime.strptime(head, CREATION_DATE_FORMAT)
    if dot:
        if not fraction.isdigit():
            raise ValueError(f"invalid fractional seconds in {value!r}")
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def _project_blog_post(record: ObjectRecord, report: RunReport | None) -> PostDraft:
    draft = PostDraft(title="", body_ref=record.id)
    title = record.find("title")
    if title is not None:
        draft.title = normalize_title(title.text)
    created = record.find("creationDate")
    if created is not None:
        try:
            draft.creation_date = parse_creation_date(created.text)
        except ValueError as exc:
            warn_event(
                logger,
                report,
                f"Invalid creation date on record {record.id}: {exc}",
                event="invalid_creation_date",
                record_id=record.id,
            )
    return draft


def _project_body_content(record: ObjectRecord) -> BodyFragment:
    content = record.find("content")
    body = record.find("body")
    return BodyFragment(
        id=(content.id or "") if content is not None else "",
        text=body.text if body is not None else "",
    )
