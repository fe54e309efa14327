"""Shared CLI utilities to avoid circular imports."""

from __future__ import annotations

import typer

from relay.adapters.base import Adapter
from relay.adapters.registry import AdapterRegistry, default_registry
from relay.core.schema import ResourceKind
from relay.utils.output import error

FORMAT_OPTION = typer.Option(None, "--format", "-F", help="Output format: json or text")


def get_registry() -> AdapterRegistry:
    return default_registry()


def get_adapter(registry: AdapterRegistry, name: str) -> Adapter:
    """Look up a tool by name or exit with the list of known tools."""
    adapter = registry.get(name)
    if adapter is None:
        error(f"Unknown tool: {name}. Known tools: {', '.join(registry.names())}")
        raise typer.Exit(1)
    return adapter


def selected_kinds(**flags: bool) -> list[ResourceKind] | None:
    """Kinds picked by --servers/--commands/... flags; None when no flag is set."""
    kinds = [ResourceKind(name.rstrip("s")) for name, on in flags.items() if on]
    return kinds or None
