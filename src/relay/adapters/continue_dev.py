"""Continue adapter: ~/.continue/config.json servers and ~/.continue/rules.md."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters._sections import ManagedSectionFile
from relay.adapters.base import ToolAdapter
from relay.core.merge import MergeOutcome
from relay.core.schema import ResourceKind, Rule, Server


class ContinueAdapter(ToolAdapter):
    name = "continue"
    display_name = "Continue"
    resources = frozenset({ResourceKind.server, ResourceKind.rule})

    def tool_dir(self) -> Path:
        return self.home / ".continue"

    def config_path(self) -> Path:
        return self.tool_dir() / "config.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path())

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def _rules_file(self) -> ManagedSectionFile:
        return ManagedSectionFile(self.tool_dir() / "rules.md", "continue-rules")

    def read_rules(self) -> list[Rule]:
        return self._rules_file().read()

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return self._rules_file().write(rules)
