"""Sync command: push canonical resources into every detected tool."""

from __future__ import annotations

from typing import Optional

import typer

from relay.cli._shared import FORMAT_OPTION, get_registry
from relay.core.errors import EmptyRegistryError, RelayError
from relay.core.schema import ResourceScope
from relay.core.store import load_canonical
from relay.sync.engine import sync_all
from relay.utils.config import load_settings
from relay.utils.output import console, error, info, output, resolve_format, success

_SCOPES = ("all", "global", "local")


def sync_command(
    tool: Optional[list[str]] = typer.Option(None, "--tool", "-t", help="Only sync this tool (repeatable)"),
    no_backup: bool = typer.Option(False, "--no-backup", help="Skip backing up native config files"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Tools synced in parallel"),
    scope: str = typer.Option("all", "--scope", "-s", help="Resources to sync: all, global or local"),
    undetected: bool = typer.Option(False, "--all-tools", help="Also write to tools not detected here"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Sync canonical resources into each tool's native config."""
    if scope not in _SCOPES:
        error(f"Invalid scope: {scope}. Use: {', '.join(_SCOPES)}")
        raise typer.Exit(1)

    try:
        settings = load_settings()
        resources = load_canonical()
    except (RelayError, ValueError) as e:
        error(str(e))
        raise typer.Exit(1)
    if scope != "all":
        resources = resources.filter_scope(ResourceScope(scope))

    registry = get_registry()
    tools = tool or None
    if tools is None and settings.disabled_tools:
        tools = [name for name in registry.names() if name not in settings.disabled_tools]

    try:
        report = sync_all(
            registry,
            resources,
            tools=tools,
            backup=settings.backup and not no_backup,
            workers=workers or settings.workers,
            detected_only=not undetected,
            keep_backups=settings.keep_backups or None,
        )
    except (EmptyRegistryError, ValueError) as e:
        error(str(e))
        raise typer.Exit(1)

    if resolve_format(fmt) == "json":
        output(report.to_dict(), fmt="json")
    else:
        if not report.results and not report.cancelled:
            info("No tools detected. Use --all-tools to write configs anyway.")
        for name, result in report.results.items():
            if result.ok:
                kinds = ", ".join(k.plural for k in result.kinds_written) or "nothing to write"
                console.print(f"  [green]ok[/green]     {name}: {kinds}")
                if result.skipped:
                    info(f"           kept hand-authored: {', '.join(result.skipped)}")
            else:
                console.print(f"  [red]failed[/red] {name}: {result.error}")
        if report.failed:
            error(report.summary())
        else:
            success(report.summary())

    if report.failed:
        raise typer.Exit(1)
