"""Claude Desktop adapter: stdio MCP servers in claude_desktop_config.json."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Server
from relay.utils.paths import app_config_dir


class ClaudeDesktopAdapter(ToolAdapter):
    name = "claude-desktop"
    display_name = "Claude Desktop"
    resources = frozenset({ResourceKind.server})

    def config_path(self) -> Path:
        # ~/Library/Application Support/Claude, %APPDATA%\Claude or ~/.config/Claude
        return app_config_dir("Claude", self.env_home) / "claude_desktop_config.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path(), remote=False)

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)
