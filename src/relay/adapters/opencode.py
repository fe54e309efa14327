"""OpenCode adapter: the ``mcp`` section of opencode.json and agent/*.md."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from relay.adapters._markdown import Metadata, markdown_to_agent, read_dir, write_dir
from relay.adapters._mcp_json import McpJsonConfig
from relay.adapters.base import ToolAdapter
from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome
from relay.core.schema import Agent, ResourceKind, Server, Transport
from relay.utils.paths import xdg_config_home


def server_to_opencode(server: Server) -> dict[str, Any]:
    """OpenCode wants the command and its arguments as one array."""
    if server.is_remote:
        entry: dict[str, Any] = {"type": "remote", "url": server.url}
        if server.headers:
            entry["headers"] = dict(server.headers)
    else:
        entry = {"type": "local", "command": [server.command, *server.args]}
        if server.env:
            entry["environment"] = dict(server.env)
    entry["enabled"] = server.enabled
    return entry


def opencode_to_server(name: str, entry: Mapping[str, Any]) -> Server:
    data: dict[str, Any] = {"name": name, "enabled": entry.get("enabled", True) is not False}
    env = entry.get("environment", entry.get("env"))
    if isinstance(env, Mapping):
        data["env"] = {str(k): str(v) for k, v in env.items()}
    if entry.get("type") == "remote":
        data["url"] = entry.get("url", "")
        data["transport"] = Transport.http
        if isinstance(entry.get("headers"), Mapping):
            data["headers"] = {str(k): str(v) for k, v in entry["headers"].items()}
    else:
        command = entry.get("command")
        if isinstance(command, list) and command:
            data["command"] = str(command[0])
            data["args"] = [str(a) for a in command[1:]]
        elif isinstance(command, str):
            data["command"] = command
    return Server.model_validate(data)


def agent_to_opencode(agent: Agent) -> tuple[Metadata, str]:
    return {"description": agent.description, "mode": "subagent", "model": agent.model}, agent.content


class OpenCodeAdapter(ToolAdapter):
    name = "opencode"
    display_name = "OpenCode"
    resources = frozenset({ResourceKind.server, ResourceKind.agent})

    def tool_dir(self) -> Path:
        return xdg_config_home(self.env_home) / "opencode"

    def config_path(self) -> Path:
        return self.tool_dir() / "opencode.json"

    def _servers(self) -> McpJsonConfig:
        return McpJsonConfig(
            self.config_path(), ("mcp",), formatter=server_to_opencode, parser=opencode_to_server
        )

    def read_servers(self) -> list[Server]:
        return self._servers().read()

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome:
        return self._servers().write(servers)

    def _agents_dir(self) -> MarkdownDir:
        return MarkdownDir(self.tool_dir() / "agent")

    def read_agents(self) -> list[Agent]:
        return read_dir(self._agents_dir(), markdown_to_agent)

    def write_agents(self, agents: Sequence[Agent]) -> MergeOutcome:
        return write_dir(self._agents_dir(), agents, agent_to_opencode)
