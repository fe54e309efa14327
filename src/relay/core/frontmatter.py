"""YAML frontmatter reader/writer for markdown-backed resources.

Commands, rules (Cursor ``.mdc``), skills (``SKILL.md``) and agents all use
a ``---``-delimited header followed by a markdown body. Only the YAML subset
these tools actually emit is understood: ``key: value`` scalars, booleans,
inline ``[a, b]`` lists, block ``- item`` lists and double-quoted strings with
backslash escapes. No PyYAML dependency.
"""

from __future__ import annotations

import re
from typing import Any

_CLOSING = re.compile(r"^---[ \t]*$", re.MULTILINE)
_ESCAPE = re.compile(r"\\(.)")
_UNESCAPED = {"n": "\n", "r": "\r", "t": "\t"}
_ESCAPED = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _unescape(text: str) -> str:
    return _ESCAPE.sub(lambda m: _UNESCAPED.get(m.group(1), m.group(1)), text)


def _scalar(raw: str) -> Any:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _unescape(value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.startswith("[") and value.endswith("]"):
        return [v.strip().strip("\"'") for v in value[1:-1].split(",") if v.strip()]
    return value


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into (metadata, body).

    A document without a complete header comes back as ``({}, text)``.
    """
    if not text.startswith("---"):
        return {}, text

    first_newline = text.find("\n")
    if first_newline == -1:
        return {}, text
    closing = _CLOSING.search(text, first_newline + 1)
    if closing is None:
        return {}, text

    header = text[first_newline + 1 : closing.start()]
    body = text[closing.end() :].lstrip("\n")

    metadata: dict[str, Any] = {}
    pending_list: str | None = None
    for line in header.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        stripped = line.strip()
        if pending_list is not None and stripped.startswith("- "):
            metadata[pending_list].append(_scalar(stripped[2:]))
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        if value.strip():
            metadata[key] = _scalar(value)
            pending_list = None
        else:
            metadata[key] = []
            pending_list = key

    return metadata, body.rstrip() + "\n" if body.strip() else ""


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    # Quote anything that would not read back as the same string
    if (
        not text
        or text != text.strip()
        or ": " in text
        or text.startswith(("[", "{", "'", '"', "#"))
        or any(c in text for c in _ESCAPED)
        or _scalar(text) != text
    ):
        escaped = "".join(_ESCAPED.get(c, c) for c in text)
        return f'"{escaped}"'
    return text


def build_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Render metadata + body. Empty strings and empty lists are omitted."""
    lines = ["---"]
    for key, value in metadata.items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, list):
            lines.append(f"{key}:")
            lines.extend(f"  - {_format_scalar(item)}" for item in value)
        else:
            lines.append(f"{key}: {_format_scalar(value)}")
    lines.append("---")
    lines.append("")
    if body.strip():
        lines.append(body.strip())
        lines.append("")
    return "\n".join(lines)
