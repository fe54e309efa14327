"""Cline adapter: ~/.cline/mcp_settings.json."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from relay.adapters._mcp_json import McpJsonConfig, server_to_entry
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Server


def server_to_cline(server: Server) -> dict[str, Any]:
    """Cline's settings UI expects ``disabled`` and ``alwaysAllow`` on every entry."""
    entry = server_to_entry(server)
    entry["disabled"] = not server.enabled
    entry["alwaysAllow"] = []
    return entry


class ClineAdapter(ToolAdapter):
    name = "cline"
    display_name = "Cline"
    resources = frozenset({ResourceKind.server})

    def tool_dir(self) -> Path:
        return self.home / ".cline"

    def config_path(self) -> Path:
        return self.tool_dir() / "mcp_settings.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path(), formatter=server_to_cline)

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)
