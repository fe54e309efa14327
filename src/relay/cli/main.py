"""Typer app: root options, the tools listing and command registration."""

from __future__ import annotations

from typing import Optional

import typer

from relay import __version__
from relay.cli._shared import FORMAT_OPTION, get_registry
from relay.utils.output import output_table, setup_logging

app = typer.Typer(
    name="agent-relay",
    help="agent-relay: sync MCP servers, commands, rules, skills and agents across AI coding tools.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"agent-relay {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log what each adapter does"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    setup_logging(verbose)


@app.command()
def tools(fmt: Optional[str] = FORMAT_OPTION) -> None:
    """List supported tools, whether each is installed, and what it can sync."""
    rows = [
        {
            "name": adapter.name,
            "tool": adapter.display_name,
            "detected": adapter.detect(),
            "config": str(adapter.config_path()),
            "resources": ", ".join(
                kind.plural for kind in sorted(adapter.supported_resources(), key=lambda k: k.value)
            ),
        }
        for adapter in get_registry().all()
    ]
    output_table(rows, ["name", "tool", "detected", "resources", "config"], fmt=fmt)


# Register subcommands
from relay.cli.backup_cmd import backup_app
from relay.cli.config_cmd import config_app
from relay.cli.import_cmd import import_command
from relay.cli.sync_cmd import sync_command

app.command("sync")(sync_command)
app.command("import")(import_command)
app.add_typer(backup_app, name="backup", help="List, create and restore config backups")
app.add_typer(config_app, name="config", help="Manage global configuration")
