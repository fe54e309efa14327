"""Import orchestrator: pull one tool's native resources into the canonical store.

Import never overwrites. A native resource whose ``(kind, name)`` already
exists in the canonical set is left out of the preview, whatever its content.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from relay.adapters.base import Adapter, capability_for, read_resources
from relay.core.results import ImportPreview, ImportResult
from relay.core.schema import CanonicalSet, ResourceKind, ResourceScope
from relay.core.store import ResourceWriter

logger = logging.getLogger(__name__)


def preview_import(
    adapter: Adapter,
    kinds: Iterable[ResourceKind] | None,
    existing: CanonicalSet,
) -> ImportPreview:
    """Read the requested kinds from adapter and queue the ones not already known.

    A kind the adapter cannot read is skipped silently; a kind whose read
    fails is recorded in ``read_errors`` and the other kinds still run.
    """
    requested = set(ResourceKind) if kinds is None else set(kinds)
    preview = ImportPreview(tool=adapter.name)
    taken = existing.identities()

    for kind in ResourceKind:
        if kind not in requested or capability_for(adapter, kind) is None:
            continue
        try:
            native = read_resources(adapter, kind)
        except Exception as e:
            logger.warning("Reading %s from %s failed: %s", kind.plural, adapter.name, e)
            preview.read_errors[kind] = str(e)
            continue

        queued = []
        for resource in native:
            if resource.identity in taken:
                preview.skipped.append(resource.identity)
                continue
            taken.add(resource.identity)
            queued.append(resource)
        if queued:
            preview.queued[kind] = queued

    logger.debug(
        "Import preview from %s: %d queued, %d skipped", adapter.name, preview.total, len(preview.skipped)
    )
    return preview


def commit_import(
    preview: ImportPreview,
    writer: ResourceWriter,
    scope: ResourceScope | None = None,
) -> ImportResult:
    """Save every queued resource through writer; per-item failures are collected."""
    result = ImportResult()
    for kind, resources in preview.queued.items():
        for resource in resources:
            item = resource if scope is None else resource.model_copy(update={"scope": scope})
            try:
                writer.save(item)
            except Exception as e:
                logger.warning("Import of %s '%s' failed: %s", kind.value, resource.name, e)
                result.errors.append(f"{kind.value} {resource.name}: {e}")
                continue
            result.counts[kind] = result.counts.get(kind, 0) + 1
    return result
