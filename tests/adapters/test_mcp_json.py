"""Tests for the shared JSON server section handling."""

import json
import logging

import pytest

from relay.adapters._mcp_json import (
    McpJsonConfig,
    entry_to_server,
    native_entries,
    server_to_entry,
    stdio_only,
)
from relay.core.errors import DocumentMalformedError
from relay.core.schema import Server, Transport


@pytest.fixture
def config(tmp_path):
    return McpJsonConfig(tmp_path / "mcp.json")


class TestEntries:
    def test_local_entry(self):
        server = Server(name="s", command="uvx", args=["pkg"], env={"TOKEN": "x"})
        assert server_to_entry(server) == {"command": "uvx", "args": ["pkg"], "env": {"TOKEN": "x"}}

    def test_remote_entry_with_headers(self):
        server = Server(name="r", url="https://x/sse", transport=Transport.sse, headers={"A": "b"})
        assert server_to_entry(server) == {"url": "https://x/sse", "type": "sse", "headers": {"A": "b"}}

    def test_parse_streamable_http_alias(self):
        assert entry_to_server("r", {"url": "u", "type": "streamable-http"}).transport == Transport.http

    def test_parse_disabled(self):
        assert entry_to_server("s", {"command": "x", "disabled": True}).enabled is False

    def test_stdio_only(self, filesystem_server, remote_server):
        assert stdio_only([filesystem_server, remote_server]) == [filesystem_server]

    def test_duplicate_native_name_first_wins(self):
        entries = native_entries(
            [Server(name="a", command="first"), Server(name="a", command="second")], server_to_entry
        )
        assert entries == {"a": {"command": "first"}}


class TestMcpJsonConfig:
    def test_bad_entries_skipped(self, config, caplog):
        config.path.write_text(
            json.dumps(
                {
                    "mcpServers": {
                        "ok": {"command": "x"},
                        "not-object": "x",
                        "empty": {},
                    }
                }
            )
        )
        with caplog.at_level(logging.WARNING, logger="relay"):
            servers = config.read()
        assert [s.name for s in servers] == ["ok"]
        assert "not-object" in caplog.text
        assert "empty" in caplog.text

    def test_malformed_json_raises(self, config):
        config.path.write_text("[1, 2]")
        with pytest.raises(DocumentMalformedError):
            config.read()

    def test_section_not_an_object(self, config, filesystem_server):
        config.path.write_text('{"mcpServers": []}')
        with pytest.raises(DocumentMalformedError):
            config.write([filesystem_server])

    def test_nested_key_path(self, tmp_path, filesystem_server):
        cfg = McpJsonConfig(tmp_path / "settings.json", ("a", "b"))
        cfg.write([filesystem_server])
        data = json.loads(cfg.path.read_text())
        assert "filesystem" in data["a"]["b"]

    def test_blank_file_treated_as_empty(self, config, filesystem_server):
        config.path.write_text("  \n")
        config.write([filesystem_server])
        assert [s.name for s in config.read()] == ["filesystem"]

    def test_output_format(self, config):
        config.write([Server(name="s", command="x")])
        assert config.path.read_text() == (
            '{\n  "mcpServers": {\n    "s": {\n      "command": "x",\n'
            '      "_managedBy": "agent-relay"\n    }\n  }\n}\n'
        )
