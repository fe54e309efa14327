"""Ownership-marking merge of engine entries into a native resource section.

Every entry the engine writes carries ``MANAGED_KEY: MANAGED_VALUE``. A write
removes all marked entries from the section and inserts the new set, marked
again. Entries without the marker belong to the user and are never changed,
moved or removed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from relay.core.errors import DocumentMalformedError

logger = logging.getLogger(__name__)

MANAGED_KEY = "_managedBy"
MANAGED_VALUE = "agent-relay"


@dataclass
class MergeOutcome:
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    # Canonical names that clash with a hand-authored entry and were not written
    skipped: list[str] = field(default_factory=list)


def is_managed(entry: Any) -> bool:
    return isinstance(entry, Mapping) and entry.get(MANAGED_KEY) == MANAGED_VALUE


def mark_managed(entry: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of entry with the marker set (last, so it reads as an annotation)."""
    marked = {k: v for k, v in entry.items() if k != MANAGED_KEY}
    marked[MANAGED_KEY] = MANAGED_VALUE
    return marked


def section(
    tree: MutableMapping[str, Any],
    key_path: tuple[str, ...],
    *,
    create: bool = True,
    factory: Callable[[], MutableMapping[str, Any]] = dict,
    source: Path | None = None,
) -> MutableMapping[str, Any] | None:
    """Walk (and optionally create) the nested mapping at key_path.

    Returns None when a level is missing and create is False. A level that
    exists but is not a mapping is a malformed document.
    """
    node = tree
    walked: list[str] = []
    for key in key_path:
        walked.append(key)
        child = node.get(key)
        if child is None:
            if not create:
                return None
            child = factory()
            node[key] = child
            child = node[key]
        elif not isinstance(child, MutableMapping):
            raise DocumentMalformedError(
                source or Path("<document>"), f"'{'.'.join(walked)}' is not a table"
            )
        node = child
    return node


def merge_entries(
    target: MutableMapping[str, Any],
    entries: Mapping[str, Mapping[str, Any]],
) -> MergeOutcome:
    """Replace every managed entry in target with entries, marked.

    Unmarked entries keep their position and content. A name already taken
    by an unmarked entry is skipped and reported.
    """
    outcome = MergeOutcome()

    for name in [k for k, v in target.items() if is_managed(v)]:
        del target[name]
        outcome.removed.append(name)

    for name, entry in entries.items():
        if name in target:
            logger.warning("Not overwriting hand-authored entry '%s'", name)
            outcome.skipped.append(name)
            continue
        target[name] = mark_managed(entry)
        outcome.added.append(name)

    logger.debug(
        "Merged section: %d removed, %d added, %d skipped",
        len(outcome.removed),
        len(outcome.added),
        len(outcome.skipped),
    )
    return outcome
