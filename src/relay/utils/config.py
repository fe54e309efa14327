"""Global configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field

CONFIG_DIR_ENV = "RELAY_CONFIG_DIR"


class RelaySettings(BaseModel):
    backup: bool = True
    keep_backups: int = Field(default=5, ge=0)
    workers: int = Field(default=4, ge=1)
    disabled_tools: list[str] = Field(default_factory=list)


def global_config_dir() -> Path:
    env = os.environ.get(CONFIG_DIR_ENV)
    config = Path(env) if env else Path.home() / ".config" / "agent-relay"
    config.mkdir(parents=True, exist_ok=True)
    return config


def load_global_config() -> dict:
    path = global_config_dir() / "config.json"
    if path.exists():
        return json.loads(path.read_text())
    return {}


def save_global_config(config: dict) -> None:
    path = global_config_dir() / "config.json"
    path.write_text(json.dumps(config, indent=2) + "\n")


def load_settings() -> RelaySettings:
    """Typed view of the global config; unknown keys are ignored."""
    return RelaySettings.model_validate(load_global_config())
