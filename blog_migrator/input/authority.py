"""
Loader for the authority source of publish dates and legacy links.

Each line of the source is a colon-separated record::

    title:YYYY-MM-DD:<reserved>:legacyLinkToken

Field 2 is reserved and ignored, as is anything after field 3. Every line
contributes one title entry and one token entry to the AuthorityIndex;
later lines overwrite earlier ones for the same key.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
import re
from typing import Iterable

from ..core.errors import AuthorityParseError
from ..core.types import AuthorityEntry, AuthorityIndex

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ":"
AUTHORITY_DATE_FORMAT = "%Y-%m-%d"
MIN_FIELDS = 4

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_authority_line(line: str, line_number: int) -> AuthorityEntry:
    """Parse one authority line.

    Raises:
        AuthorityParseError: If the line has fewer than four fields or the
            date field is not ``YYYY-MM-DD``
    """
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < MIN_FIELDS:
        raise AuthorityParseError(
            line_number, line, f"expected {MIN_FIELDS} fields, found {len(parts)}"
        )
    try:
        canonical_date = _parse_date(parts[1])
    except ValueError as exc:
        raise AuthorityParseError(line_number, line, f"invalid date {parts[1]!r}") from exc
    return AuthorityEntry(
        title=parts[0],
        canonical_date=canonical_date,
        legacy_link_token=parts[3].strip(),
    )


def parse_authority(lines: Iterable[str]) -> list[AuthorityEntry]:
    """Parse every non-blank line of the authority source."""
    entries: list[AuthorityEntry] = []
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        entries.append(parse_authority_line(line, line_number))
    return entries


def build_authority_index(entries: Iterable[AuthorityEntry]) -> AuthorityIndex:
    """Build the title and token lookups in a single pass."""
    index = AuthorityIndex()
    for entry in entries:
        index.title_to_date[entry.title] = entry.canonical_date
        index.token_to_date[entry.legacy_link_token] = entry.canonical_date
    logger.debug(
        "Indexed %d titles and %d link tokens",
        len(index.title_to_date),
        len(index.token_to_date),
    )
    return index


def _parse_date(value: str) -> date:
    value = value.strip()
    if not _DATE_RE.fullmatch(value):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return datetime.strptime(value, AUTHORITY_DATE_FORMAT).date()
