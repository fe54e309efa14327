"""Output formatting utilities: text vs JSON, rich tables, logging setup."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()
error_console = Console(stderr=True)


def is_piped() -> bool:
    return not sys.stdout.isatty()


def resolve_format(fmt: str | None) -> str:
    """json when piped, text for a TTY, unless fmt says otherwise."""
    if fmt is None:
        return "json" if is_piped() else "text"
    return fmt


def output(data: Any, fmt: str | None = None) -> None:
    """Output data in the requested format."""
    fmt = resolve_format(fmt)

    if fmt == "json":
        if isinstance(data, str):
            print(json.dumps({"value": data}))
        elif hasattr(data, "model_dump"):
            print(data.model_dump_json(indent=2))
        else:
            print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, str):
        console.print(data)
    else:
        console.print_json(json.dumps(data, default=str))


def output_table(rows: list[dict[str, Any]], columns: list[str], fmt: str | None = None) -> None:
    if resolve_format(fmt) == "json":
        print(json.dumps(rows, indent=2, default=str))
    else:
        table = Table()
        for col in columns:
            table.add_column(col.replace("_", " ").title())
        for row in rows:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        console.print(table)


def error(msg: str) -> None:
    error_console.print(f"[red]Error:[/red] {msg}")


def warn(msg: str) -> None:
    error_console.print(f"[yellow]{msg}[/yellow]")


def success(msg: str) -> None:
    console.print(f"[green]{msg}[/green]")


def info(msg: str) -> None:
    console.print(f"[dim]{msg}[/dim]")


def setup_logging(verbose: bool = False) -> None:
    """Route the package's log records through rich on stderr."""
    logger = logging.getLogger("relay")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=error_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
