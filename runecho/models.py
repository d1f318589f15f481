"""Core data models for the repository IR."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Tuple

from .hashing import compute_root_hash

if TYPE_CHECKING:
    from .parsers.base import FileStructure

IR_VERSION = 1


def _sorted_unique(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted(set(values)))


@dataclass(frozen=True)
class FileEntry:
    """Content hash plus the shallow symbol lists of one source file.

    Every sequence is sorted ascending and duplicate-free; an empty category is an
    empty tuple, never ``None``.
    """

    hash: str
    imports: Tuple[str, ...] = ()
    functions: Tuple[str, ...] = ()
    classes: Tuple[str, ...] = ()
    exports: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("imports", "functions", "classes", "exports"):
            object.__setattr__(self, name, _sorted_unique(getattr(self, name)))

    @classmethod
    def from_structure(cls, content_hash: str, structure: "FileStructure") -> "FileEntry":
        return cls(
            hash=content_hash,
            imports=tuple(structure.imports),
            functions=tuple(structure.functions),
            classes=tuple(structure.classes),
            exports=tuple(structure.exports),
        )


@dataclass(frozen=True)
class RepoIR:
    """Intermediate representation of a whole source tree.

    ``files`` is keyed by canonical path (forward slashes, NFC). Its iteration order
    carries no meaning; anything order-sensitive sorts the keys first.
    """

    root_hash: str
    files: Mapping[str, FileEntry] = field(default_factory=dict)
    version: int = IR_VERSION

    @classmethod
    def build(cls, files: Dict[str, FileEntry]) -> "RepoIR":
        """Return an IR over ``files`` with a freshly computed root hash."""
        return cls(root_hash=compute_root_hash(files), files=dict(files))


__all__ = ["FileEntry", "IR_VERSION", "RepoIR"]
