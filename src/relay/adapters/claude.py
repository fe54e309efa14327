"""Claude Code adapter: ~/.claude.json MCP servers plus the ~/.claude/ resource directories."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from relay.adapters._markdown import (
    agent_to_markdown,
    command_to_markdown,
    markdown_to_agent,
    markdown_to_command,
    markdown_to_skill,
    read_dir,
    skill_to_markdown,
    write_dir,
)
from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters._sections import ManagedSectionFile
from relay.adapters.base import ToolAdapter
from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome
from relay.core.schema import Agent, Command, ResourceKind, Rule, Server, Skill


class ClaudeAdapter(ToolAdapter):
    """Claude Code keeps user-scope MCP servers in ~/.claude.json, next to
    (not inside) the ~/.claude/ directory that holds everything else."""

    name = "claude"
    display_name = "Claude Code"
    resources = frozenset(ResourceKind)

    def tool_dir(self) -> Path:
        return self.home / ".claude"

    def config_path(self) -> Path:
        return self.home / ".claude.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(self.config_path())

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def read_commands(self) -> list[Command]:
        return read_dir(MarkdownDir(self.tool_dir() / "commands"), markdown_to_command)

    def write_commands(self, commands: Sequence[Command]) -> MergeOutcome:
        return write_dir(MarkdownDir(self.tool_dir() / "commands"), commands, command_to_markdown)

    def _rules(self) -> ManagedSectionFile:
        return ManagedSectionFile(self.tool_dir() / "CLAUDE.md", "claude-md")

    def read_rules(self) -> list[Rule]:
        return self._rules().read()

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return self._rules().write(rules)

    def _skills_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "skills", nested_file="SKILL.md")

    def read_skills(self) -> list[Skill]:
        return read_dir(self._skills_dir(), markdown_to_skill)

    def write_skills(self, skills: Sequence[Skill]) -> MergeOutcome:
        return write_dir(self._skills_dir(), skills, skill_to_markdown)

    def read_agents(self) -> list[Agent]:
        return read_dir(MarkdownDir(self.tool_dir() / "agents"), markdown_to_agent)

    def write_agents(self, agents: Sequence[Agent]) -> MergeOutcome:
        return write_dir(MarkdownDir(self.tool_dir() / "agents"), agents, agent_to_markdown)
