"""Content hashing and root fingerprint computation."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from .models import FileEntry

_CHUNK_SIZE = 1024 * 1024


def hash_bytes(data: bytes) -> str:
    """Return the SHA-256 digest of ``data`` as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path | str) -> str:
    """Hash a file's full contents, streaming it in chunks.

    Raises ``OSError`` when the file cannot be opened or read.
    """
    digest = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def compute_root_hash(files: Mapping[str, "FileEntry"]) -> str:
    """Fold every ``(path, hash)`` pair into one fingerprint.

    Paths are sorted ascending and rendered as ``path:hash`` lines joined by
    ``\\n`` with no trailing newline. An empty mapping hashes the empty byte string.
    """
    lines = [f"{path}:{files[path].hash}" for path in sorted(files)]
    return hash_bytes("\n".join(lines).encode("utf-8"))


__all__ = ["compute_root_hash", "hash_bytes", "hash_file"]
