"""Canonical path handling for IR keys."""

from __future__ import annotations

import os
import unicodedata
from pathlib import Path

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep and sep != "/")


def normalize_path(rel_path: str) -> str:
    """Return the canonical form of a root-relative path.

    Separators become ``/``, a single leading ``./`` is dropped and the result is
    NFC-composed, so ``café.ts`` stored decomposed (as macOS does) and composed
    (as Linux usually does) produce the same key.
    """
    normalized = rel_path
    for separator in _SEPARATORS:
        normalized = normalized.replace(separator, "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return unicodedata.normalize("NFC", normalized)


def relative_key(root: Path, path: Path) -> str:
    """Canonical key for ``path`` relative to ``root``."""
    return normalize_path(os.path.relpath(path, root))


__all__ = ["normalize_path", "relative_key"]
