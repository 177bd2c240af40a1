"""Codec for the generated `trait.*.js` implementor data files.

Each file is a self-invoking script that fills an `implementors` object and
hands it to `window.register_implementors` (or parks it on
`window.pending_implementors` when the page script is not loaded yet):

    (function() {var implementors = {};
    implementors["bitflags"] = ["impl <a ...>Binary</a> for ...",];
    implementors["gl"] = [];
    ...
    })()

Keys and descriptors are JSON string literals. Array literals may end with a
trailing comma, which plain JSON does not accept, so arrays are decoded one
string at a time.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Mapping, Sequence


_HEADER_RE = re.compile(r"\bvar\s+implementors\s*=\s*\{\s*\}")
_ASSIGN_RE = re.compile(r"^[ \t]*implementors\[", re.MULTILINE)
_WS_RE = re.compile(r"\s*")

_DECODER = json.JSONDecoder()

_PRELUDE = "(function() {var implementors = {};\n"
_REGISTER = """
            if (window.register_implementors) {
                window.register_implementors(implementors);
            } else {
                window.pending_implementors = implementors;
            }

})()
"""


class ImplementorsFormatError(ValueError):
    """Raised when a data file cannot be decoded."""


def _skip_ws(text: str, pos: int) -> int:
    return _WS_RE.match(text, pos).end()  # type: ignore[union-attr]


def _expect(text: str, pos: int, token: str) -> int:
    pos = _skip_ws(text, pos)
    if not text.startswith(token, pos):
        found = text[pos : pos + 20]
        raise ImplementorsFormatError(f"Expected {token!r} at offset {pos}, found {found!r}")
    return pos + len(token)


def _decode_string(text: str, pos: int) -> tuple[str, int]:
    pos = _skip_ws(text, pos)
    try:
        value, end = _DECODER.raw_decode(text, pos)
    except json.JSONDecodeError as e:
        raise ImplementorsFormatError(f"Invalid string literal at offset {pos}: {e.msg}") from e
    if not isinstance(value, str):
        raise ImplementorsFormatError(f"Expected a string literal at offset {pos}, got {type(value).__name__}")
    return value, end


def _decode_array(text: str, pos: int) -> tuple[list[str], int]:
    pos = _expect(text, pos, "[")
    out: list[str] = []
    while True:
        pos = _skip_ws(text, pos)
        if text.startswith("]", pos):
            return out, pos + 1
        value, pos = _decode_string(text, pos)
        out.append(value)
        pos = _skip_ws(text, pos)
        if text.startswith(",", pos):
            pos += 1
            continue
        if not text.startswith("]", pos):
            raise ImplementorsFormatError(f"Expected ',' or ']' at offset {pos}")


def parse_implementors_js(text: str) -> dict[str, list[str]]:
    """Decode a data file into `{namespace: [descriptor, ...]}`.

    Assignment order is preserved. Namespaces with an empty array are kept.
    """

    if _HEADER_RE.search(text) is None:
        raise ImplementorsFormatError("No `var implementors = {}` declaration found")

    groups: dict[str, list[str]] = {}
    pos = 0
    while True:
        m = _ASSIGN_RE.search(text, pos)
        if m is None:
            return groups
        key, pos = _decode_string(text, m.end())
        pos = _expect(text, pos, "]")
        pos = _expect(text, pos, "=")
        groups[key], pos = _decode_array(text, pos)
        pos = _expect(text, pos, ";")


def render_implementors_js(groups: Mapping[str, Sequence[str]]) -> str:
    """Render groups in the generator's file format, namespaces sorted."""

    items = dict(groups)
    lines = [_PRELUDE]
    for ns in sorted(items):
        descs = "".join(json.dumps(d, ensure_ascii=False) + "," for d in items[ns])
        lines.append(f"implementors[{json.dumps(ns, ensure_ascii=False)}] = [{descs}];\n")
    lines.append(_REGISTER)
    return "".join(lines)


def subject_from_path(path: str | Path, root: str | Path) -> str:
    """`<root>/core/fmt/trait.Binary.js` -> `core/fmt/trait.Binary`."""

    rel = Path(path).resolve().relative_to(Path(root).resolve())
    if rel.suffix != ".js":
        raise ValueError(f"Not a .js data file: {path}")
    return rel.with_suffix("").as_posix()


def subject_display_name(subject: str) -> str:
    """`core/fmt/trait.Binary` -> `core::fmt::Binary`."""

    parts = [p for p in subject.strip("/").split("/") if p]
    if not parts:
        raise ValueError("subject cannot be empty")
    leaf = parts[-1]
    _, dot, name = leaf.partition(".")
    parts[-1] = name if dot else leaf
    return "::".join(parts)


def load_implementors_file(path: str | Path) -> dict[str, list[str]]:
    p = Path(path)
    try:
        return parse_implementors_js(p.read_text(encoding="utf-8"))
    except ImplementorsFormatError as e:
        raise ImplementorsFormatError(f"{p}: {e}") from e
