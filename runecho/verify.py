"""Determinism checks for IR generation and storage."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .generator import Generator
from .logging import get_logger
from .models import RepoIR
from .stores import deserialize_ir, serialize_ir

logger = get_logger("verify")


@dataclass(frozen=True)
class DeterminismReport:
    """Outcome of comparing several serialized IRs byte for byte."""

    name: str
    passed: bool
    runs: int
    size: int
    file_count: int
    root_hash: str
    first_difference: Optional[int] = None
    detail: str = ""


def check_determinism(
    root: str | os.PathLike[str],
    runs: int = 100,
    generator: Generator | None = None,
) -> DeterminismReport:
    """Generate ``runs`` times from ``root`` and require identical serialized output."""
    if runs < 1:
        raise ValueError("runs must be at least 1")
    generator = generator or Generator()
    return _compare("repeat", [root] * runs, generator)


def check_path_variants(
    paths: Sequence[str | os.PathLike[str]],
    generator: Generator | None = None,
) -> DeterminismReport:
    """Generate once per spelling of the same root and require identical output."""
    if not paths:
        raise ValueError("at least one path is required")
    generator = generator or Generator()
    return _compare("path-variants", list(paths), generator)


def path_variants(root: str | os.PathLike[str]) -> List[str]:
    """Relative, trailing-slash, absolute and ``parent/../name`` spellings of ``root``."""
    absolute = Path(root).expanduser().resolve()
    relative = os.path.relpath(absolute)
    detour = os.path.join(relative, os.pardir, absolute.name)
    return [relative, relative + os.sep, str(absolute), detour]


def check_round_trip(ir: RepoIR) -> DeterminismReport:
    """Serialize, deserialize and serialize again; both renderings must match."""
    first = serialize_ir(ir)
    second = serialize_ir(deserialize_ir(first))
    passed = first == second
    return DeterminismReport(
        name="round-trip",
        passed=passed,
        runs=2,
        size=len(first),
        file_count=len(ir.files),
        root_hash=ir.root_hash,
        first_difference=None if passed else _first_difference(first, second),
        detail="" if passed else "re-serialized IR differs from the original rendering",
    )


def _compare(
    name: str, roots: Sequence[str | os.PathLike[str]], generator: Generator
) -> DeterminismReport:
    reference_ir = generator.generate(roots[0])
    reference = serialize_ir(reference_ir)
    for index, root in enumerate(roots[1:], start=1):
        data = serialize_ir(generator.generate(root))
        if data != reference:
            offset = _first_difference(reference, data)
            logger.warning("%s: run %d (%s) differs at byte %d", name, index + 1, root, offset)
            return DeterminismReport(
                name=name,
                passed=False,
                runs=index + 1,
                size=len(reference),
                file_count=len(reference_ir.files),
                root_hash=reference_ir.root_hash,
                first_difference=offset,
                detail=f"run {index + 1} ({root}) differs from run 1 ({roots[0]})",
            )

    return DeterminismReport(
        name=name,
        passed=True,
        runs=len(roots),
        size=len(reference),
        file_count=len(reference_ir.files),
        root_hash=reference_ir.root_hash,
    )


def _first_difference(left: bytes, right: bytes) -> int:
    for index, (a, b) in enumerate(zip(left, right)):
        if a != b:
            return index
    return min(len(left), len(right))


__all__ = [
    "DeterminismReport",
    "check_determinism",
    "check_path_variants",
    "check_round_trip",
    "path_variants",
]
