"""Cursor adapter: ~/.cursor/mcp.json, commands/*.md and rules/*.mdc."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relay.adapters._markdown import (
    command_to_markdown,
    markdown_to_command,
    mdc_to_rule,
    read_dir,
    rule_to_mdc,
    write_dir,
)
from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters.base import ToolAdapter
from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome
from relay.core.schema import Command, ResourceKind, Rule, Server


class CursorAdapter(ToolAdapter):
    name = "cursor"
    display_name = "Cursor"
    resources = frozenset({ResourceKind.server, ResourceKind.command, ResourceKind.rule})

    def config_path(self) -> Path:
        return self.home / ".cursor" / "mcp.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path(), remote=False)

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def read_commands(self) -> list[Command]:
        return read_dir(MarkdownDir(self.tool_dir() / "commands"), markdown_to_command)

    def write_commands(self, commands: Sequence[Command]) -> MergeOutcome:
        return write_dir(MarkdownDir(self.tool_dir() / "commands"), commands, command_to_markdown)

    def _rules_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "rules", suffix=".mdc")

    def read_rules(self) -> list[Rule]:
        return read_dir(self._rules_dir(), mdc_to_rule)

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return write_dir(self._rules_dir(), rules, rule_to_mdc)
