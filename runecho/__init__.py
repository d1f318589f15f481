"""Deterministic shallow IR for JavaScript-family source trees.

The four entry points below are what callers normally need::

    ir = runecho.generate("path/to/repo")
    runecho.save(ir, "path/to/repo/.ai/ir.json")
    prior = runecho.load("path/to/repo/.ai/ir.json")
    ir = runecho.update(prior, "path/to/repo")
"""

from __future__ import annotations

import os

from .generator import DEFAULT_IGNORED_PATHS, Generator, GeneratorConfig
from .hashing import compute_root_hash, hash_bytes, hash_file
from .models import IR_VERSION, FileEntry, RepoIR
from .paths import normalize_path
from .stores import (
    DEFAULT_IR_PATH,
    IRFormatError,
    deserialize_ir,
    load_ir as load,
    save_ir as save,
    serialize_ir,
)


def generate(root: str | os.PathLike[str], config: GeneratorConfig | None = None) -> RepoIR:
    """Walk ``root`` and return a fresh IR."""
    return Generator(config).generate(root)


def update(
    prior: RepoIR, root: str | os.PathLike[str], config: GeneratorConfig | None = None
) -> RepoIR:
    """Walk ``root`` again, reusing entries from ``prior`` whose content hash is unchanged."""
    return Generator(config).update(prior, root)


__all__ = [
    "DEFAULT_IGNORED_PATHS",
    "DEFAULT_IR_PATH",
    "FileEntry",
    "Generator",
    "GeneratorConfig",
    "IRFormatError",
    "IR_VERSION",
    "RepoIR",
    "compute_root_hash",
    "deserialize_ir",
    "generate",
    "hash_bytes",
    "hash_file",
    "load",
    "normalize_path",
    "save",
    "serialize_ir",
    "update",
]
