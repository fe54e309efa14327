"""Zed adapter: ``context_servers`` in Zed's settings.json."""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from relay.adapters._mcp_json import McpJsonConfig, entry_to_server, server_to_entry
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Server
from relay.utils.paths import app_config_dir, xdg_config_home


def server_to_zed(server: Server) -> dict[str, Any]:
    entry = server_to_entry(server)
    entry.pop("type", None)
    if not server.is_remote:
        entry = {"source": "custom", **entry}
    return entry


def zed_to_server(name: str, entry: Mapping[str, Any]) -> Server:
    command = entry.get("command")
    if isinstance(command, Mapping):
        # Older settings nest the launch command: {"command": {"path", "args", "env"}}
        flat = {k: v for k, v in entry.items() if k != "command"}
        flat["command"] = command.get("path")
        for key in ("args", "env"):
            if key in command:
                flat[key] = command[key]
        entry = flat
    return entry_to_server(name, entry)


class ZedAdapter(ToolAdapter):
    name = "zed"
    display_name = "Zed"
    resources = frozenset({ResourceKind.server})

    def tool_dir(self) -> Path:
        # ~/.config/zed on macOS too
        if sys.platform == "win32":
            return app_config_dir("Zed", self.env_home)
        return xdg_config_home(self.env_home) / "zed"

    def config_path(self) -> Path:
        return self.tool_dir() / "settings.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(
            self.config_path(), ("context_servers",), formatter=server_to_zed, parser=zed_to_server
        )

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)
