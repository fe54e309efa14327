"""GitHub Copilot CLI adapter: github-copilot/config.json, commands/ and skills/."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

from relay.adapters._markdown import (
    command_to_markdown,
    markdown_to_command,
    markdown_to_skill,
    read_dir,
    skill_to_markdown,
    write_dir,
)
from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters.base import ToolAdapter
from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome
from relay.core.schema import Command, ResourceKind, Server, Skill
from relay.utils.paths import app_config_dir, xdg_config_home


class CopilotAdapter(ToolAdapter):
    name = "copilot"
    display_name = "GitHub Copilot"
    resources = frozenset({ResourceKind.server, ResourceKind.command, ResourceKind.skill})

    def tool_dir(self) -> Path:
        if sys.platform == "win32":
            return app_config_dir("github-copilot", self.env_home)
        return xdg_config_home(self.env_home) / "github-copilot"

    def config_path(self) -> Path:
        return self.tool_dir() / "config.json"

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

    def _skills_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "skills", nested_file="SKILL.md")

    def read_skills(self) -> list[Skill]:
        return read_dir(self._skills_dir(), markdown_to_skill)

    def write_skills(self, skills: Sequence[Skill]) -> MergeOutcome:
        return write_dir(self._skills_dir(), skills, skill_to_markdown)
