"""Tests for runecho.paths."""

from __future__ import annotations

import unicodedata
from pathlib import Path

import pytest

from runecho import paths
from runecho.paths import normalize_path, relative_key

COMPOSED = "caf\u00e9.ts"
DECOMPOSED = "cafe\u0301.ts"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("src/app.js", "src/app.js"),
        ("./src/app.js", "src/app.js"),
        ("././app.js", "./app.js"),
        ("app.js", "app.js"),
        ("src/./app.js", "src/./app.js"),
    ],
)
def test_normalize_path_strips_single_leading_dot_slash(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_normalize_path_composes_unicode() -> None:
    assert DECOMPOSED != COMPOSED
    assert normalize_path(DECOMPOSED) == COMPOSED
    assert normalize_path(COMPOSED) == COMPOSED
    assert unicodedata.is_normalized("NFC", normalize_path(f"dir/{DECOMPOSED}"))


def test_normalize_path_converts_platform_separators(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths, "_SEPARATORS", ("\\",))

    assert normalize_path(".\\src\\lib\\util.ts") == "src/lib/util.ts"


def test_normalize_path_output_has_no_backslash_on_windows_style_input(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(paths, "_SEPARATORS", ("\\",))

    assert "\\" not in normalize_path("a\\b\\c.gs")


def test_relative_key_is_root_relative(tmp_path: Path) -> None:
    target = tmp_path / "src" / "nested" / DECOMPOSED

    assert relative_key(tmp_path, target) == f"src/nested/{COMPOSED}"
