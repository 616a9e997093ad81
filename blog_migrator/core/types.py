"""
Core data types for the blog migrator.

This module defines the records that flow through the reconciliation pipeline:
- Property / ObjectRecord: Generic nodes decoded from the entity export
- PostDraft / BodyFragment / Unrecognized: Typed projections of ObjectRecord
- AuthorityEntry / AuthorityIndex: Override data from the authority source
- CanonicalPost: Deduplicated, date- and link-resolved post ready for output
- RunReport: Counters and recoverable warnings collected during a run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union

# Value left in place of a creation date that could not be parsed.
ZERO_DATE = datetime.min


@dataclass
class Property:
    """A raw name/value pair on an exported object.

    Attributes:
        name: The property name (e.g. "title", "creationDate", "body")
        id: Foreign key to another record when the property is a reference
        text: Direct text content of the property node
    """
    name: str
    id: str | None = None
    text: str = ""


@dataclass
class ObjectRecord:
    """A generic node from the entity export.

    Attributes:
        id: The record identifier
        cls: The class discriminant (e.g. "BlogPost", "BodyContent")
        properties: Properties in document order
    """
    id: str
    cls: str
    properties: list[Property] = field(default_factory=list)

    def find(self, name: str) -> Property | None:
        """Return the first property with the given name, if any."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass
class PostDraft:
    """Post metadata extracted from a BlogPost record.

    Attributes:
        title: Post title with double quotes normalized to apostrophes
        body_ref: Id of the BlogPost record, referenced by its BodyContent
        creation_date: Creation timestamp, ZERO_DATE when unparseable
    """
    title: str
    body_ref: str
    creation_date: datetime = ZERO_DATE


@dataclass
class BodyFragment:
    """Post body extracted from a BodyContent record."""
    id: str
    text: str


@dataclass
class Unrecognized:
    """A record whose class is not projected."""
    record: ObjectRecord


Projected = Union[PostDraft, BodyFragment, Unrecognized]


@dataclass
class AuthorityEntry:
    """One line of the authority source."""
    title: str
    canonical_date: date
    legacy_link_token: str


@dataclass
class AuthorityIndex:
    """Lookup tables derived from the authority source.

    Attributes:
        title_to_date: Post title -> canonical publish date
        token_to_date: Legacy link token -> canonical publish date
    """
    title_to_date: dict[str, date] = field(default_factory=dict)
    token_to_date: dict[str, date] = field(default_factory=dict)


@dataclass
class CanonicalPost:
    """A reconciled post ready to be written.

    Attributes:
        title: Post title
        body: Body markup, possibly link-rewritten; empty when no body was found
        publish_date: Authority date when available, otherwise creation date
    """
    title: str
    body: str
    publish_date: datetime


@dataclass
class RunReport:
    """Statistics and recoverable diagnostics collected during a run.

    Attributes:
        records: Number of ObjectRecords parsed from the export
        drafts: Number of PostDrafts projected
        bodies: Number of BodyFragments projected
        unrecognized: Number of records with an unprojected class
        authority_entries: Number of authority lines read
        posts: Number of canonical posts after deduplication
        date_overrides: Posts whose date came from the authority source
        links_rewritten: Legacy links replaced across all bodies
        files_written: Output documents written
        warnings: Human-readable warning messages, in the order they occurred
    """
    records: int = 0
    drafts: int = 0
    bodies: int = 0
    unrecognized: int = 0
    authority_entries: int = 0
    posts: int = 0
    date_overrides: int = 0
    links_rewritten: int = 0
    files_written: int = 0
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
