"""Per-call outcome records for sync and import.

Nothing here is persisted; each record describes one call and is handed to
the CLI for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from relay.core.schema import Resource, ResourceKind


@dataclass
class ToolResult:
    tool: str
    error: Exception | None = None
    kinds_written: list[ResourceKind] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    backup_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "ok": self.ok,
            "error": str(self.error) if self.error else None,
            "kinds_written": [k.value for k in self.kinds_written],
            "skipped": self.skipped,
            "backup": str(self.backup_path) if self.backup_path else None,
        }


@dataclass
class SyncReport:
    """Results of one sync, one slot per adapter in the order they were scheduled."""

    results: dict[str, ToolResult] = field(default_factory=dict)
    cancelled: list[str] = field(default_factory=list)

    def errors(self) -> dict[str, Exception | None]:
        """tool -> error (None on success), for every tool that ran."""
        return {name: r.error for name, r in self.results.items()}

    @property
    def succeeded(self) -> list[str]:
        return [name for name, r in self.results.items() if r.ok]

    @property
    def failed(self) -> list[str]:
        return [name for name, r in self.results.items() if not r.ok]

    def summary(self) -> str:
        text = f"{len(self.succeeded)} tools synced, {len(self.failed)} failed"
        if self.failed:
            reasons = "; ".join(f"{name}: {self.results[name].error}" for name in self.failed)
            text += f": {reasons}"
        if self.cancelled:
            text += f" ({len(self.cancelled)} cancelled)"
        return text

    def to_dict(self) -> dict:
        return {
            "summary": self.summary(),
            "results": [r.to_dict() for r in self.results.values()],
            "cancelled": self.cancelled,
        }


@dataclass
class ImportPreview:
    """Resources read from one tool and queued for import."""

    tool: str
    queued: dict[ResourceKind, list[Resource]] = field(default_factory=dict)
    # (kind, name) pairs left out because the name is already taken
    skipped: list[tuple[ResourceKind, str]] = field(default_factory=list)
    read_errors: dict[ResourceKind, str] = field(default_factory=dict)

    def of(self, kind: ResourceKind) -> list[Resource]:
        return self.queued.get(kind, [])

    @property
    def servers(self) -> list[Resource]:
        return self.of(ResourceKind.server)

    @property
    def commands(self) -> list[Resource]:
        return self.of(ResourceKind.command)

    @property
    def rules(self) -> list[Resource]:
        return self.of(ResourceKind.rule)

    @property
    def skills(self) -> list[Resource]:
        return self.of(ResourceKind.skill)

    @property
    def agents(self) -> list[Resource]:
        return self.of(ResourceKind.agent)

    @property
    def total(self) -> int:
        return sum(len(v) for v in self.queued.values())

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "queued": {k.plural: [r.name for r in v] for k, v in self.queued.items() if v},
            "skipped": [f"{k.value} {name}" for k, name in self.skipped],
            "read_errors": {k.value: msg for k, msg in self.read_errors.items()},
        }


@dataclass
class ImportResult:
    counts: dict[ResourceKind, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        return {
            "imported": {k.plural: n for k, n in self.counts.items()},
            "total": self.total,
            "errors": self.errors,
        }
