"""Codex (OpenAI) adapter: ~/.codex/config.toml, prompts/, AGENTS.md and skills/.

config.toml is edited through tomlkit so the user's comments, key order and
formatting outside ``[mcp_servers.*]`` survive every write.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import tomlkit

from relay.adapters._markdown import (
    command_to_markdown,
    markdown_to_command,
    markdown_to_skill,
    read_dir,
    skill_to_markdown,
    write_dir,
)
from relay.adapters._mcp_json import entry_to_server, native_entries, parse_section
from relay.adapters._sections import ManagedSectionFile
from relay.adapters.base import ToolAdapter
from relay.core.document import TomlDocument
from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome, merge_entries, section
from relay.core.schema import Command, ResourceKind, Rule, Server, Skill

logger = logging.getLogger(__name__)

SERVERS_KEY = "mcp_servers"


def server_to_codex(server: Server) -> dict[str, Any]:
    if server.is_remote:
        entry: dict[str, Any] = {"url": server.url}
        if server.headers:
            entry["http_headers"] = dict(server.headers)
    else:
        entry = {"command": server.command}
        if server.args:
            entry["args"] = list(server.args)
    if server.env:
        entry["env"] = dict(server.env)
    return entry


def codex_to_server(name: str, entry: Mapping[str, Any]) -> Server:
    plain = entry.unwrap() if hasattr(entry, "unwrap") else dict(entry)
    if isinstance(plain.get("http_headers"), Mapping):
        plain["headers"] = plain.pop("http_headers")
    if plain.get("enabled") is False:
        plain["disabled"] = True
    return entry_to_server(name, plain)


class CodexAdapter(ToolAdapter):
    name = "codex"
    display_name = "Codex CLI"
    resources = frozenset(
        {ResourceKind.server, ResourceKind.command, ResourceKind.rule, ResourceKind.skill}
    )

    def tool_dir(self) -> Path:
        return self.home / ".codex"

    def config_path(self) -> Path:
        return self.tool_dir() / "config.toml"

    def read_servers(self) -> list[Server]:
        doc = TomlDocument.load(self.config_path())
        servers = section(doc.tree, (SERVERS_KEY,), create=False, source=self.config_path())
        if servers is None:
            return []
        return parse_section(self.config_path(), servers, codex_to_server)

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        path = self.config_path()
        doc = TomlDocument.load(path)
        entries = native_entries(servers, server_to_codex)
        if not entries and section(doc.tree, (SERVERS_KEY,), create=False, source=path) is None:
            return MergeOutcome()
        target = section(
            doc.tree,
            (SERVERS_KEY,),
            factory=lambda: tomlkit.table(is_super_table=True),
            source=path,
        )
        outcome = merge_entries(target, entries)
        doc.save()
        logger.info("%s: %d server(s) written", path, len(outcome.added))
        return outcome

    def _prompts_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "prompts")

    def read_commands(self) -> list[Command]:
        return read_dir(self._prompts_dir(), markdown_to_command)

    def write_commands(self, commands: Sequence[Command]) -> MergeOutcome:
        return write_dir(self._prompts_dir(), commands, command_to_markdown)

    def _agents_md(self) -> ManagedSectionFile:
        return ManagedSectionFile(self.tool_dir() / "AGENTS.md", "agents-md")

    def read_rules(self) -> list[Rule]:
        return self._agents_md().read()

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome:
        return self._agents_md().write(rules)

    def _skills_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "skills", nested_file="SKILL.md")

    def read_skills(self) -> list[Skill]:
        return read_dir(self._skills_dir(), markdown_to_skill)

    def write_skills(self, skills: Sequence[Skill]) -> MergeOutcome:
        return write_dir(self._skills_dir(), skills, skill_to_markdown)
