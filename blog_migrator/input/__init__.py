"""Readers for the entity export and the authority source."""

from .authority import build_authority_index, parse_authority
from .export_parser import parse_export

__all__ = ["parse_export", "parse_authority", "build_authority_index"]
