"""Directory walking and IR generation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, Optional, Sequence

from .hashing import hash_bytes, hash_file
from .logging import get_logger
from .models import FileEntry, RepoIR
from .parsers import ParseError, Parser, default_parser
from .paths import relative_key

DEFAULT_IGNORED_PATHS: FrozenSet[str] = frozenset(
    {"node_modules", "dist", ".git", ".cursor", ".vscode"}
)


@dataclass(frozen=True)
class GeneratorConfig:
    """Directory base names to skip; an empty sequence selects the defaults."""

    ignored_paths: Sequence[str] = ()


def _extension(name: str) -> str:
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


def _resolve_root(root: str | os.PathLike[str]) -> Path:
    # A symlinked root is followed, and the root name itself is never checked
    # against the ignore set; only entries below it are filtered.
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Repository path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Repository path is not a directory: {root}")
    return root_path


class Generator:
    """Walks a source tree and builds (or incrementally refreshes) its IR.

    The walk never follows symlinks, prunes any directory whose base name is in
    ``ignored_paths`` and only visits files the parser supports. Files that cannot be
    read or parsed are logged and left out; the rest of the walk continues.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        parser: Parser | None = None,
    ) -> None:
        config = config or GeneratorConfig()
        self.ignored_paths: FrozenSet[str] = (
            frozenset(config.ignored_paths) or DEFAULT_IGNORED_PATHS
        )
        self.parser = parser or default_parser()
        self.logger = get_logger("generator")

    def generate(self, root: str | os.PathLike[str]) -> RepoIR:
        """Return a fresh IR for every supported file under ``root``."""
        root_path = _resolve_root(root)
        self.logger.debug("Generating IR for %s", root_path)

        files: Dict[str, FileEntry] = {}
        for key, path in self._iter_source_files(root_path):
            entry = self._build_entry(path)
            if entry is not None:
                files[key] = entry

        ir = RepoIR.build(files)
        self.logger.info("Generated IR for %d files (root hash %s)", len(files), ir.root_hash[:12])
        return ir

    def update(self, prior: RepoIR, root: str | os.PathLike[str]) -> RepoIR:
        """Return a new IR for ``root``, reusing entries of ``prior`` whose hash still matches.

        Reused entries are the very same objects held by ``prior``. Files that have
        disappeared from disk are dropped.
        """
        root_path = _resolve_root(root)
        self.logger.debug("Updating IR for %s (%d prior files)", root_path, len(prior.files))

        files: Dict[str, FileEntry] = {}
        reused = 0
        for key, path in self._iter_source_files(root_path):
            try:
                current_hash = hash_file(path)
            except OSError as exc:
                self.logger.warning("Skipping %s: failed to hash file (%s)", path, exc)
                continue

            previous = prior.files.get(key)
            if previous is not None and previous.hash == current_hash:
                files[key] = previous
                reused += 1
                continue

            entry = self._build_entry(path)
            if entry is not None:
                self.logger.debug("Re-parsed %s", key)
                files[key] = entry

        ir = RepoIR.build(files)
        self.logger.info(
            "Updated IR for %d files (%d reused, %d re-parsed, %d dropped)",
            len(files),
            reused,
            len(files) - reused,
            sum(1 for key in prior.files if key not in files),
        )
        return ir

    # ------------------------------------------------------------------
    # Internal helpers

    def _iter_source_files(self, root: Path) -> Iterator[tuple[str, Path]]:
        """Yield ``(canonical key, path)`` pairs in a stable, sorted walk order."""
        seen: Dict[str, Path] = {}
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            current_dir = Path(dirpath)

            kept = []
            for name in sorted(dirnames):
                if name in self.ignored_paths:
                    continue
                if (current_dir / name).is_symlink():
                    self.logger.debug("Skipping symlinked directory %s", current_dir / name)
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if not self.parser.supports_extension(_extension(filename)):
                    continue
                path = current_dir / filename
                if path.is_symlink():
                    self.logger.debug("Skipping symlinked file %s", path)
                    continue

                key = relative_key(root, path)
                if key in seen:
                    self.logger.warning(
                        "Skipping %s: canonical path %s already taken by %s", path, key, seen[key]
                    )
                    continue
                seen[key] = path
                yield key, path

    def _build_entry(self, path: Path) -> Optional[FileEntry]:
        try:
            data = path.read_bytes()
        except OSError as exc:
            self.logger.warning("Skipping %s: failed to read file (%s)", path, exc)
            return None

        try:
            structure = self.parser.parse(data.decode("utf-8", errors="replace"))
        except ParseError as exc:
            self.logger.warning("Skipping %s: failed to parse file (%s)", path, exc)
            return None

        return FileEntry.from_structure(hash_bytes(data), structure)

    def _on_walk_error(self, exc: OSError) -> None:
        self.logger.warning("Failed to access %s: %s", exc.filename, exc)


__all__ = ["DEFAULT_IGNORED_PATHS", "Generator", "GeneratorConfig"]
