"""Windsurf adapter: ~/.codeium/windsurf/mcp_config.json and ~/.windsurfrules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from relay.adapters._mcp_json import McpJsonConfig, entry_to_server, server_to_entry
from relay.adapters._sections import ManagedSectionFile
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Rule, Server


def server_to_windsurf(server: Server) -> dict[str, Any]:
    return server_to_entry(server, url_key="serverUrl")


def windsurf_to_server(name: str, entry: Mapping[str, Any]) -> Server:
    return entry_to_server(name, entry, url_keys=("serverUrl", "url"))


class WindsurfAdapter(ToolAdapter):
    name = "windsurf"
    display_name = "Windsurf"
    resources = frozenset({ResourceKind.server, ResourceKind.rule})

    def tool_dir(self) -> Path:
        return self.home / ".codeium" / "windsurf"

    def config_path(self) -> Path:
        return self.tool_dir() / "mcp_config.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(
            self.config_path(), formatter=server_to_windsurf, parser=windsurf_to_server
        )

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def _rules_file(self) -> ManagedSectionFile:
        return ManagedSectionFile(self.home / ".windsurfrules", "windsurfrules")

    def read_rules(self) -> list[Rule]:
        return self._rules_file().read()

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return self._rules_file().write(rules)
