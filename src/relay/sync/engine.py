"""Sync orchestrator: push one canonical set into every detected tool.

Each adapter owns its own files, so adapters run concurrently on a thread
pool. An adapter's failure is recorded in its own result slot and never
stops the others. Within one adapter, kinds are written in order and the
first failure ends that adapter's run.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from relay.adapters.base import Adapter, write_resources
from relay.adapters.registry import AdapterRegistry
from relay.core.backup import create_backup, rotate_backups
from relay.core.errors import EmptyRegistryError
from relay.core.results import SyncReport, ToolResult
from relay.core.schema import CanonicalSet, ResourceKind

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


def sync_adapter(
    adapter: Adapter,
    resources: CanonicalSet,
    *,
    kinds: Iterable[ResourceKind] | None = None,
    backup: bool = True,
    keep_backups: int | None = None,
) -> ToolResult:
    """Write resources into one tool and return its outcome. Never raises.

    ``kinds`` are the kinds being synced (default: all). A supplied kind with
    no resources removes the tool's managed entries of that kind. Disabled
    resources are not filtered here; ``sync_all`` does that once per call.
    """
    result = ToolResult(adapter.name)
    selected = list(ResourceKind) if kinds is None else [k for k in ResourceKind if k in set(kinds)]

    try:
        if backup:
            result.backup_path = create_backup(adapter.config_path())
            if keep_backups is not None:
                rotate_backups(adapter.config_path(), keep_backups)

        for kind in selected:
            outcome = write_resources(adapter, kind, resources.of(kind))
            if outcome is None:
                continue
            result.kinds_written.append(kind)
            result.skipped.extend(outcome.skipped)
            logger.debug("%s: wrote %d %s", adapter.name, len(outcome.added), kind.plural)
    except Exception as e:
        logger.warning("Sync to %s failed: %s", adapter.name, e)
        result.error = e

    return result


def _select(
    registry: AdapterRegistry, tools: Iterable[str] | None, detected_only: bool
) -> list[Adapter]:
    if len(registry) == 0:
        raise EmptyRegistryError("No adapters registered")

    wanted = list(tools) if tools is not None else None
    if wanted is not None:
        unknown = [name for name in wanted if name not in registry]
        if unknown:
            raise ValueError(f"Unknown tool(s): {', '.join(unknown)}")

    candidates = registry.detected() if detected_only else registry.all()
    if wanted is not None:
        candidates = [a for a in candidates if a.name in wanted]
    return candidates


def sync_all(
    registry: AdapterRegistry,
    resources: CanonicalSet,
    *,
    tools: Iterable[str] | None = None,
    kinds: Iterable[ResourceKind] | None = None,
    backup: bool = True,
    workers: int = DEFAULT_WORKERS,
    cancel: threading.Event | None = None,
    detected_only: bool = True,
    keep_backups: int | None = None,
) -> SyncReport:
    """Sync resources to every detected adapter (or only ``tools``).

    Raises EmptyRegistryError for an empty registry and ValueError for an
    unknown tool name; every other failure ends up in the report. When
    ``cancel`` is set, adapters that have not started yet are reported as
    cancelled and adapters already writing are allowed to finish.
    """
    candidates = _select(registry, tools, detected_only)
    active = resources.active()
    kinds = list(kinds) if kinds is not None else None
    report = SyncReport()

    if not candidates:
        logger.info("No tools to sync")
        return report

    def run(adapter: Adapter) -> ToolResult | None:
        if cancel is not None and cancel.is_set():
            return None
        return sync_adapter(
            adapter, active, kinds=kinds, backup=backup, keep_backups=keep_backups
        )

    # One future per adapter, so no adapter is ever written by two threads
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(candidates)))) as pool:
        futures = {adapter.name: pool.submit(run, adapter) for adapter in candidates}

    for name, future in futures.items():
        result = future.result()
        if result is None:
            report.cancelled.append(name)
        else:
            report.results[name] = result

    logger.info(report.summary())
    return report
