"""Deterministic JSON storage for the repository IR."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..logging import get_logger
from ..models import IR_VERSION, FileEntry, RepoIR

DEFAULT_IR_PATH = Path(".ai") / "ir.json"

_LIST_FIELDS = ("imports", "functions", "classes", "exports")

logger = get_logger("stores.ir")


class IRFormatError(ValueError):
    """Raised when stored content is not a valid serialized IR."""


def serialize_ir(ir: RepoIR) -> bytes:
    """Render ``ir`` as pretty-printed UTF-8 JSON with a fixed layout.

    Top-level fields come out as ``version``, ``root_hash``, ``files``; file keys in
    ascending order; entry fields as ``hash``, ``imports``, ``functions``,
    ``classes``, ``exports``. ``sort_keys`` is not used because it would reorder
    both of the fixed field sequences.
    """
    payload = {
        "version": ir.version,
        "root_hash": ir.root_hash,
        "files": {path: _entry_to_dict(ir.files[path]) for path in sorted(ir.files)},
    }
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def deserialize_ir(data: bytes | str) -> RepoIR:
    """Parse serialized IR, raising :class:`IRFormatError` on any malformed input."""
    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise IRFormatError(f"IR is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise IRFormatError("IR must be a JSON object")

    version = payload.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise IRFormatError("IR 'version' must be an integer")
    if version != IR_VERSION:
        raise IRFormatError(f"Unsupported IR version {version} (expected {IR_VERSION})")

    root_hash = payload.get("root_hash")
    if not isinstance(root_hash, str):
        raise IRFormatError("IR 'root_hash' must be a string")

    raw_files = payload.get("files", {})
    if raw_files is None:
        raw_files = {}
    if not isinstance(raw_files, dict):
        raise IRFormatError("IR 'files' must be an object")

    files: Dict[str, FileEntry] = {}
    for path, raw in raw_files.items():
        files[path] = _entry_from_dict(path, raw)

    return RepoIR(root_hash=root_hash, files=files, version=version)


def save_ir(ir: RepoIR, path: Path | str | None = None) -> Path:
    """Write ``ir`` to ``path`` (``DEFAULT_IR_PATH`` when empty) and return the target.

    Parent directories are created as needed. The write is a plain overwrite.
    """
    target = Path(path) if path else DEFAULT_IR_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(serialize_ir(ir))
    logger.debug("Saved IR with %d files to %s", len(ir.files), target)
    return target


def load_ir(path: Path | str | None = None) -> RepoIR:
    """Read IR from ``path`` (``DEFAULT_IR_PATH`` when empty).

    A missing file surfaces as ``FileNotFoundError``; unreadable content as
    :class:`IRFormatError`. Either way the caller can fall back to a full generate.
    """
    target = Path(path) if path else DEFAULT_IR_PATH
    data = target.read_bytes()
    try:
        ir = deserialize_ir(data)
    except IRFormatError as exc:
        raise IRFormatError(f"{target}: {exc}") from exc
    logger.debug("Loaded IR with %d files from %s", len(ir.files), target)
    return ir


# ------------------------------------------------------------------
# Internal helpers


def _entry_to_dict(entry: FileEntry) -> Dict[str, object]:
    return {
        "hash": entry.hash,
        "imports": list(entry.imports),
        "functions": list(entry.functions),
        "classes": list(entry.classes),
        "exports": list(entry.exports),
    }


def _entry_from_dict(path: str, raw: Any) -> FileEntry:
    if not isinstance(raw, dict):
        raise IRFormatError(f"Entry for {path!r} must be an object")

    file_hash = raw.get("hash")
    if not isinstance(file_hash, str):
        raise IRFormatError(f"Entry for {path!r} is missing a string 'hash'")

    lists: Dict[str, Tuple[str, ...]] = {}
    for name in _LIST_FIELDS:
        lists[name] = tuple(_as_str_list(path, name, raw.get(name)))

    return FileEntry(hash=file_hash, **lists)


def _as_str_list(path: str, name: str, value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise IRFormatError(f"Entry for {path!r} has a non-string-list {name!r}")
    return value


__all__ = [
    "DEFAULT_IR_PATH",
    "IRFormatError",
    "deserialize_ir",
    "load_ir",
    "save_ir",
    "serialize_ir",
]
