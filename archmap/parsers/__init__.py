"""Source parsers that extract import specifiers."""

from __future__ import annotations

from .tree_sitter import ImportParser, language_for_path, parse_source

__all__ = ["ImportParser", "language_for_path", "parse_source"]
