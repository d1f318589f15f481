"""Shallow source parsers used by the IR generator."""

from __future__ import annotations

from .base import FileStructure, ParseError, Parser
from .javascript import JSParser


def default_parser() -> Parser:
    """Return the parser used when a generator is built without one."""
    return JSParser()


__all__ = [
    "FileStructure",
    "JSParser",
    "ParseError",
    "Parser",
    "default_parser",
]
