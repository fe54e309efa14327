"""Gemini CLI adapter: ~/.gemini/settings.json MCP servers and GEMINI.md."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from relay.adapters._mcp_json import McpJsonConfig, entry_to_server, server_to_entry
from relay.adapters._sections import ManagedSectionFile
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Rule, Server, Transport


def server_to_gemini(server: Server) -> dict[str, Any]:
    # Streamable HTTP goes under httpUrl, SSE under url
    if server.is_remote and server.transport != Transport.sse:
        return server_to_entry(server, url_key="httpUrl")
    entry = server_to_entry(server)
    entry.pop("type", None)
    return entry


def gemini_to_server(name: str, entry: dict[str, Any]) -> Server:
    server = entry_to_server(name, entry, url_keys=("httpUrl", "url"))
    if "httpUrl" not in entry and isinstance(entry.get("url"), str) and not server.command:
        server.transport = Transport.sse
    return server


class GeminiAdapter(ToolAdapter):
    name = "gemini"
    display_name = "Gemini CLI"
    resources = frozenset({ResourceKind.server, ResourceKind.rule})

    def config_path(self) -> Path:
        return self.home / ".gemini" / "settings.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path(), formatter=server_to_gemini, parser=gemini_to_server)

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def _gemini_md(self) -> ManagedSectionFile:
        return ManagedSectionFile(self.tool_dir() / "GEMINI.md", "gemini-md")

    def read_rules(self) -> list[Rule]:
        return self._gemini_md().read()

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return self._gemini_md().write(rules)
