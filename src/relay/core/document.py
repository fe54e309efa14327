"""Native documents: schema-free, order-preserving trees loaded from tool configs.

JSON files load into plain ``dict`` (insertion ordered); TOML files load into
a ``tomlkit`` document so comments and formatting survive the round trip.
Either way, anything outside the sub-section an adapter rewrites is written
back exactly as it was read.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from relay.core.errors import DocumentIOError, DocumentMalformedError

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path through a temp file in the same directory.

    The live file is either the old content or the new content, never a
    partial write.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise DocumentIOError(path, e) from e

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if path.exists():
            os.chmod(tmp, path.stat().st_mode & 0o777)
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise DocumentIOError(path, e) from e


def read_text(path: Path) -> str | None:
    """File content, or None when the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise DocumentIOError(path, e) from e


class JsonDocument:
    """A JSON config file whose top level must be an object."""

    def __init__(self, path: Path, tree: dict[str, Any] | None = None) -> None:
        self.path = path
        self.tree: dict[str, Any] = tree if tree is not None else {}

    @classmethod
    def load(cls, path: Path) -> JsonDocument:
        text = read_text(path)
        if text is None or not text.strip():
            return cls(path)
        try:
            tree = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentMalformedError(path, str(e)) from e
        if not isinstance(tree, dict):
            raise DocumentMalformedError(path, "top level is not a JSON object")
        return cls(path, tree)

    def dumps(self) -> str:
        return json.dumps(self.tree, indent=2, ensure_ascii=False) + "\n"

    def save(self) -> None:
        atomic_write_text(self.path, self.dumps())
        logger.debug("Wrote %s", self.path)


class TomlDocument:
    """A TOML config file, kept as a tomlkit document."""

    def __init__(self, path: Path, tree: tomlkit.TOMLDocument | None = None) -> None:
        self.path = path
        self.tree = tree if tree is not None else tomlkit.document()

    @classmethod
    def load(cls, path: Path) -> TomlDocument:
        text = read_text(path)
        if text is None or not text.strip():
            return cls(path)
        try:
            return cls(path, tomlkit.parse(text))
        except TOMLKitError as e:
            raise DocumentMalformedError(path, str(e)) from e

    def dumps(self) -> str:
        return tomlkit.dumps(self.tree)

    def save(self) -> None:
        atomic_write_text(self.path, self.dumps())
        logger.debug("Wrote %s", self.path)
