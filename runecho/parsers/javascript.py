"""Pattern-based shallow parser for JavaScript, TypeScript and Apps Script files.

There is no tokenizer or syntax tree here. Each symbol category is a flat regex scan
over the comment-stripped text, which keeps the output deterministic and cheap at
the cost of precision:

* ``//`` inside a string literal is treated as a comment start.
* ``export { a as b }`` records ``a``, the name before the rename.
* ``export default class Foo`` records ``class`` as the default export.
* declarations nested in other bodies are picked up or missed depending on the
  surrounding text, never by scope.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence

from .base import FileStructure, Parser

# ``re.ASCII`` keeps ``\w`` to ``[A-Za-z0-9_]``. ``\s`` is narrowed further by
# ``_compile`` to space, tab, newline, form feed and carriage return; vertical tab
# is not whitespace for these scans.
_SPACE = r"[ \t\n\f\r]"

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern.replace(r"\s", _SPACE), re.ASCII)


_IMPORT_PATTERNS: Sequence[Pattern[str]] = (
    # import x from "m"; import { a, b } from "m"; import * as ns from "m"; import "m"
    _compile(r"""import\s+(?:[\w{},* \t\n\f\r]*\s+from\s+)?['"]([^'"]+)['"]"""),
    # require("m")
    _compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
)

_FUNCTION_PATTERNS: Sequence[Pattern[str]] = (
    # function name( / async function name(
    _compile(r"(?:^|\s)(?:async\s+)?function\s+(\w+)\s*\("),
    # const name = function( / const name = async function(
    _compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?function\s*\("),
    # const name = (a, b) => / const name = async a =>
    _compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?(?:\([^)]*\)|[\w]+)\s*=>"),
)

_CLASS_PATTERNS: Sequence[Pattern[str]] = (
    _compile(r"(?:^|\s)(?:export\s+(?:default\s+)?)?class\s+(\w+)"),
)

_EXPORT_LIST = _compile(r"export\s+\{([^}]+)\}")

_EXPORT_PATTERNS: Sequence[Pattern[str]] = (
    _compile(r"export\s+(?:const|let|var|function|class|async\s+function)\s+(\w+)"),
    _compile(r"export\s+default\s+(\w+)"),
)


class JSParser(Parser):
    """Extracts imports, functions, classes and exports from ``.js``/``.ts``/``.gs`` text."""

    extensions = (".js", ".ts", ".gs")

    def parse(self, source: str) -> FileStructure:
        text = strip_comments(source)
        return FileStructure(
            imports=_sorted_unique(_scan(text, _IMPORT_PATTERNS)),
            functions=_sorted_unique(_scan(text, _FUNCTION_PATTERNS)),
            classes=_sorted_unique(_scan(text, _CLASS_PATTERNS)),
            exports=_sorted_unique(_scan_exports(text)),
        )


def strip_comments(source: str) -> str:
    """Drop ``/* */`` blocks, then everything after the first ``//`` on each line."""
    without_blocks = _BLOCK_COMMENT.sub("", source)
    lines = []
    for line in without_blocks.split("\n"):
        index = line.find("//")
        lines.append(line[:index] if index >= 0 else line)
    return "\n".join(lines)


def _scan(text: str, patterns: Iterable[Pattern[str]]) -> List[str]:
    found: List[str] = []
    for pattern in patterns:
        found.extend(match.group(1) for match in pattern.finditer(text))
    return found


def _scan_exports(text: str) -> List[str]:
    names: List[str] = []
    for match in _EXPORT_LIST.finditer(text):
        for raw in match.group(1).split(","):
            name = raw.strip()
            rename = name.find(" as ")
            if rename >= 0:
                name = name[:rename].strip()
            if name:
                names.append(name)
    names.extend(_scan(text, _EXPORT_PATTERNS))
    return names


def _sorted_unique(values: List[str]) -> List[str]:
    result: List[str] = []
    for value in sorted(values):
        if not result or result[-1] != value:
            result.append(value)
    return result


__all__ = ["JSParser", "strip_comments"]
