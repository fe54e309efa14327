"""Shared MCP server read/write for JSON configs with an ``mcpServers``-style section."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from relay.core.document import JsonDocument
from relay.core.merge import MergeOutcome, merge_entries, section
from relay.core.schema import Server, Transport

logger = logging.getLogger(__name__)

EntryFormatter = Callable[[Server], dict[str, Any]]
EntryParser = Callable[[str, Mapping[str, Any]], Server]


def stdio_only(servers: Sequence[Server]) -> list[Server]:
    """Drop remote servers for tools that can only launch local processes."""
    kept = [s for s in servers if not s.is_remote]
    if len(kept) != len(servers):
        logger.debug("Dropped %d remote server(s)", len(servers) - len(kept))
    return kept


def server_to_entry(server: Server, url_key: str = "url") -> dict[str, Any]:
    """The common ``{command, args, env}`` / ``{url, headers}`` shape."""
    if server.is_remote:
        entry: dict[str, Any] = {url_key: server.url}
        if server.transport != Transport.stdio and url_key == "url":
            entry["type"] = server.transport.value
        if server.headers:
            entry["headers"] = dict(server.headers)
    else:
        entry = {"command": server.command}
        if server.args:
            entry["args"] = list(server.args)
    if server.env:
        entry["env"] = dict(server.env)
    return entry


def entry_to_server(name: str, entry: Mapping[str, Any], url_keys: Sequence[str] = ("url",)) -> Server:
    data: dict[str, Any] = {"name": name}
    if isinstance(entry.get("command"), str):
        data["command"] = entry["command"]
    if isinstance(entry.get("args"), list):
        data["args"] = [str(a) for a in entry["args"]]
    if isinstance(entry.get("env"), Mapping):
        data["env"] = {str(k): str(v) for k, v in entry["env"].items()}
    if isinstance(entry.get("headers"), Mapping):
        data["headers"] = {str(k): str(v) for k, v in entry["headers"].items()}
    for key in url_keys:
        if isinstance(entry.get(key), str):
            data["url"] = entry[key]
            break
    kind = entry.get("type") or entry.get("transport")
    if kind in ("http", "streamable-http", "streamableHttp"):
        data["transport"] = Transport.http
    elif kind == "sse":
        data["transport"] = Transport.sse
    elif data.get("url") and not data.get("command"):
        data["transport"] = Transport.http
    if entry.get("disabled") is True:
        data["enabled"] = False
    return Server.model_validate(data)


def parse_section(
    source: Path, servers_section: Mapping[str, Any], parser: EntryParser
) -> list[Server]:
    """Every parseable server in a section; bad entries are logged and skipped."""
    servers = []
    for name, entry in servers_section.items():
        if not isinstance(entry, Mapping):
            logger.warning("Skipping server '%s' in %s: not an object", name, source)
            continue
        try:
            server = parser(str(name), entry)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Skipping server '%s' in %s: %s", name, source, e)
            continue
        if not server.command and not server.url:
            logger.warning("Skipping server '%s' in %s: no command or url", name, source)
            continue
        servers.append(server)
    return servers


def native_entries(servers: Sequence[Server], formatter: EntryFormatter) -> dict[str, dict[str, Any]]:
    """native name -> entry. The first server wins a duplicate native name."""
    entries: dict[str, dict[str, Any]] = {}
    for server in servers:
        if server.native_name in entries:
            logger.warning("Duplicate server name '%s', keeping the first", server.native_name)
            continue
        entries[server.native_name] = formatter(server)
    return entries


class McpJsonConfig:
    """Servers stored as name-keyed objects somewhere in a JSON file."""

    def __init__(
        self,
        path: Path,
        key_path: tuple[str, ...] = ("mcpServers",),
        formatter: EntryFormatter = server_to_entry,
        parser: EntryParser = entry_to_server,
        remote: bool = True,
    ) -> None:
        self.path = path
        self.key_path = key_path
        self.formatter = formatter
        self.parser = parser
        self.remote = remote

    def read(self) -> list[Server]:
        doc = JsonDocument.load(self.path)
        servers_section = section(doc.tree, self.key_path, create=False, source=self.path)
        if servers_section is None:
            return []
        return parse_section(self.path, servers_section, self.parser)

    def write(self, servers: Sequence[Server]) -> MergeOutcome:
        if not self.remote:
            servers = stdio_only(servers)
        doc = JsonDocument.load(self.path)
        entries = native_entries(servers, self.formatter)
        if not entries and section(doc.tree, self.key_path, create=False, source=self.path) is None:
            # Nothing to add and nothing of ours to remove
            return MergeOutcome()
        target = section(doc.tree, self.key_path, source=self.path)
        outcome = merge_entries(target, entries)
        doc.save()
        logger.info("%s: %d server(s) written", self.path, len(outcome.added))
        return outcome
