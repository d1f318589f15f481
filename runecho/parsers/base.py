"""Base classes for shallow source parsers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Tuple


class ParseError(ValueError):
    """Raised by a parser that cannot produce any structure for a file."""


@dataclass
class FileStructure:
    """Top-level symbols of one source file; nested scopes are never included."""

    imports: List[str] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)


class Parser(ABC):
    """Contract for parsers that extract shallow structure from source text."""

    extensions: Tuple[str, ...] = ()

    def supports_extension(self, ext: str) -> bool:
        """Return True when files with extension ``ext`` (leading dot included) are handled."""
        return ext in self.extensions

    @abstractmethod
    def parse(self, source: str) -> FileStructure:
        """Return the top-level structure of ``source``, sorted and de-duplicated."""
