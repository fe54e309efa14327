"""Config subcommands: get, set, list for global agent-relay settings."""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from relay.cli._shared import FORMAT_OPTION
from relay.utils.config import RelaySettings, load_global_config, save_global_config
from relay.utils.output import error, info, output, resolve_format, success

config_app = typer.Typer(no_args_is_help=True)

_VALID_KEYS = set(RelaySettings.model_fields)


def _parse_value(key: str, raw: str) -> object:
    if key == "disabled_tools":
        return [v.strip() for v in raw.split(",") if v.strip()]
    if key == "backup":
        return raw.lower() in ("1", "true", "yes", "on")
    return raw


@config_app.command("get")
def config_get(
    key: str = typer.Argument(..., help="Configuration key"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Get a configuration value (the default when unset)."""
    if key not in _VALID_KEYS:
        error(f"Unknown key: {key}. Valid keys: {', '.join(sorted(_VALID_KEYS))}")
        raise typer.Exit(1)

    value = getattr(RelaySettings.model_validate(load_global_config()), key)
    if resolve_format(fmt) == "json":
        output({"key": key, "value": value}, fmt="json")
    else:
        info(f"{key}: {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="Value to set (comma-separated for disabled_tools)"),
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """Set a configuration value."""
    if key not in _VALID_KEYS:
        error(f"Unknown key: {key}. Valid keys: {', '.join(sorted(_VALID_KEYS))}")
        raise typer.Exit(1)

    config = load_global_config()
    config[key] = _parse_value(key, value)
    try:
        settings = RelaySettings.model_validate(config)
    except ValidationError as e:
        error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    config[key] = getattr(settings, key)
    save_global_config(config)

    if resolve_format(fmt) == "json":
        output({"key": key, "value": config[key]}, fmt="json")
    else:
        success(f"{key} = {config[key]}")


@config_app.command("list")
def config_list(
    fmt: Optional[str] = FORMAT_OPTION,
) -> None:
    """List all configuration values, defaults included."""
    settings = RelaySettings.model_validate(load_global_config())
    if resolve_format(fmt) == "json":
        output(settings.model_dump(), fmt="json")
    else:
        for k, v in settings.model_dump().items():
            info(f"{k}: {v}")
