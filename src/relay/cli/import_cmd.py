"""Import command: pull a tool's native resources into the canonical store."""

from __future__ import annotations

from typing import Optional

import typer

from relay.cli._shared import FORMAT_OPTION, get_adapter, get_registry, selected_kinds
from relay.core.errors import RelayError
from relay.core.schema import ResourceKind, ResourceScope
from relay.core.store import global_store, load_canonical, local_store
from relay.sync.importer import commit_import, preview_import
from relay.utils.output import error, info, output, resolve_format, success, warn


def import_command(
    tool: str = typer.Argument(..., help="Tool to import from (see `agent-relay tools`)"),
    servers: bool = typer.Option(False, "--servers", help="Import MCP servers"),
    commands: bool = typer.Option(False, "--commands", help="Import commands"),
    rules: bool = typer.Option(False, "--rules", help="Import rules"),
    skills: bool = typer.Option(False, "--skills", help="Import skills"),
    agents: bool = typer.Option(False, "--agents", help="Import agents"),
    local: bool = typer.Option(False, "--local", help="Save into the project store instead of the global one"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be imported"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Import resources from a tool. With no kind flags, every kind is imported."""
    adapter = get_adapter(get_registry(), tool)
    kinds = selected_kinds(servers=servers, commands=commands, rules=rules, skills=skills, agents=agents)

    writer = local_store() if local else global_store()
    if writer is None:
        error("Not inside a project directory (no .git or .agent-relay found)")
        raise typer.Exit(1)

    try:
        existing = load_canonical()
    except RelayError as e:
        error(str(e))
        raise typer.Exit(1)

    preview = preview_import(adapter, kinds, existing)
    as_json = resolve_format(fmt) == "json"

    if dry_run or preview.is_empty:
        if as_json:
            output({**preview.to_dict(), "dry_run": dry_run}, fmt="json")
            return
        for kind, message in preview.read_errors.items():
            warn(f"Could not read {kind.plural}: {message}")
        if preview.is_empty:
            info(f"Nothing to import from {adapter.display_name}")
            return
        info("Dry run -- the following would be imported:")
        for kind in ResourceKind:
            for resource in preview.of(kind):
                info(f"  {kind.value}: {resource.name}")
        for kind, name in preview.skipped:
            info(f"  skipped {kind.value} {name} (already exists)")
        return

    result = commit_import(preview, writer, ResourceScope.local if local else ResourceScope.global_)

    if as_json:
        output({**preview.to_dict(), **result.to_dict()}, fmt="json")
    else:
        for kind, message in preview.read_errors.items():
            warn(f"Could not read {kind.plural}: {message}")
        if result.total:
            success(f"Imported {result.total} resources from {adapter.display_name}")
        if preview.skipped:
            info(f"Skipped {len(preview.skipped)} already in the store")
        for message in result.errors:
            error(message)

    if result.errors:
        raise typer.Exit(1)
