"""Backup subcommands: list, create, restore native config backups."""

from __future__ import annotations

from typing import Optional

import typer

from relay.cli._shared import FORMAT_OPTION, get_adapter, get_registry
from relay.core.backup import backup_info, create_backup, restore_backup
from relay.core.errors import NoBackupFoundError, RelayError
from relay.utils.output import error, info, output, output_table, resolve_format, success

backup_app = typer.Typer(no_args_is_help=True)


@backup_app.command("list")
def backup_list(
    tool: Optional[str] = typer.Option(None, "--tool", "-t", help="Only this tool"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """List backups of each tool's config file, oldest first."""
    registry = get_registry()
    adapters = [get_adapter(registry, tool)] if tool else registry.all()

    rows = []
    for adapter in adapters:
        for backup in backup_info(adapter.config_path()):
            rows.append({
                "tool": adapter.name,
                "path": str(backup.path),
                "modified": backup.modified.isoformat(timespec="seconds"),
                "size": backup.size,
            })

    if not rows and resolve_format(fmt) != "json":
        info("No backups found")
        return
    output_table(rows, ["tool", "modified", "size", "path"], fmt=fmt)


@backup_app.command("create")
def backup_create(
    tool: str = typer.Option(..., "--tool", "-t", help="Tool whose config to back up"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Back up a tool's config file now."""
    adapter = get_adapter(get_registry(), tool)
    try:
        path = create_backup(adapter.config_path())
    except RelayError as e:
        error(str(e))
        raise typer.Exit(1)

    if resolve_format(fmt) == "json":
        output({"tool": tool, "backup": str(path) if path else None}, fmt="json")
    elif path is None:
        info(f"Nothing to back up: {adapter.config_path()} is missing or unchanged since the last backup")
    else:
        success(f"Backed up to {path}")


@backup_app.command("restore")
def backup_restore(
    tool: str = typer.Option(..., "--tool", "-t", help="Tool whose config to restore"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Restore a tool's config file from its most recent backup."""
    adapter = get_adapter(get_registry(), tool)
    try:
        source = restore_backup(adapter.config_path())
    except NoBackupFoundError:
        error(f"No backup found for {adapter.display_name} ({adapter.config_path()})")
        raise typer.Exit(1)
    except RelayError as e:
        error(str(e))
        raise typer.Exit(1)

    if resolve_format(fmt) == "json":
        output({"tool": tool, "restored_from": str(source)}, fmt="json")
    else:
        success(f"Restored {adapter.config_path()} from {source.name}")
