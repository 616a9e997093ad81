"""Fatal errors raised by the migration pipeline."""

from __future__ import annotations

from pathlib import Path


class MigrationError(ValueError):
    """Base class for errors that abort a migration run."""


class InputError(MigrationError):
    """An input file could not be opened or decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class ExportParseError(MigrationError):
    """The entity export is not well-formed markup."""


class AuthorityParseError(MigrationError):
    """A line of the authority source could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Authority line {line_number}: {reason}: {line!r}")


class OutputError(MigrationError):
    """The output directory could not be prepared."""
