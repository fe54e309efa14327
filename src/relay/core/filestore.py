"""Managed merge over a directory of markdown resources.

Commands, Cursor rules, skills and agents live one-per-file (or, for skills,
one-per-directory) rather than as entries of a single document. Ownership is
carried in the frontmatter: a file whose header has ``_managedBy:
agent-relay`` was written by us, anything else belongs to the user.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from relay.core.document import atomic_write_text, read_text
from relay.core.errors import DocumentIOError
from relay.core.frontmatter import build_frontmatter, parse_frontmatter
from relay.core.merge import MANAGED_KEY, MergeOutcome, is_managed, mark_managed
from relay.utils.paths import check_name

logger = logging.getLogger(__name__)


class MarkdownDir:
    """A directory holding ``<name><suffix>`` files, or ``<name>/<nested_file>``."""

    def __init__(self, directory: Path, suffix: str = ".md", nested_file: str | None = None) -> None:
        self.directory = directory
        self.suffix = suffix
        self.nested_file = nested_file

    def item_path(self, name: str) -> Path:
        check_name(name)
        if self.nested_file:
            return self.directory / name / self.nested_file
        return self.directory / f"{name}{self.suffix}"

    def names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        if self.nested_file:
            return sorted(
                d.name for d in self.directory.iterdir() if (d / self.nested_file).is_file()
            )
        return sorted(f.stem for f in self.directory.glob(f"*{self.suffix}") if f.is_file())

    def read(self, name: str) -> tuple[dict[str, Any], str] | None:
        text = read_text(self.item_path(name))
        if text is None:
            return None
        return parse_frontmatter(text)

    def items(self) -> Iterator[tuple[str, dict[str, Any], str]]:
        """(name, metadata, body) for every file, with the marker stripped."""
        for name in self.names():
            parsed = self.read(name)
            if parsed is None:
                continue
            metadata, body = parsed
            metadata.pop(MANAGED_KEY, None)
            yield name, metadata, body

    def is_managed(self, name: str) -> bool:
        parsed = self.read(name)
        return parsed is not None and is_managed(parsed[0])

    def _remove(self, name: str) -> None:
        path = self.item_path(name)
        try:
            if self.nested_file:
                shutil.rmtree(path.parent)
            else:
                path.unlink()
        except OSError as e:
            raise DocumentIOError(path, e) from e

    def merge(self, items: Mapping[str, tuple[dict[str, Any], str]]) -> MergeOutcome:
        """Make the managed files match items. Unmarked files are left alone."""
        outcome = MergeOutcome()
        existing = {name: self.is_managed(name) for name in self.names()}

        for name, managed in existing.items():
            if managed and name not in items:
                self._remove(name)
                outcome.removed.append(name)

        for name, (metadata, body) in items.items():
            path = self.item_path(name)
            if name in existing and not existing[name]:
                logger.warning("Not overwriting hand-authored file %s", path)
                outcome.skipped.append(name)
                continue
            text = build_frontmatter(mark_managed(metadata), body)
            if read_text(path) != text:
                atomic_write_text(path, text)
            outcome.added.append(name)

        logger.debug(
            "Merged %s: %d removed, %d written, %d skipped",
            self.directory,
            len(outcome.removed),
            len(outcome.added),
            len(outcome.skipped),
        )
        return outcome
