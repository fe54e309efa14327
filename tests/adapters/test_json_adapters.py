"""Native entry shapes for the JSON-configured tools."""

import json

from relay.adapters.claude_desktop import ClaudeDesktopAdapter
from relay.adapters.cline import ClineAdapter
from relay.adapters.continue_dev import ContinueAdapter
from relay.adapters.cursor import CursorAdapter
from relay.adapters.gemini import GeminiAdapter, gemini_to_server, server_to_gemini
from relay.adapters.opencode import OpenCodeAdapter, opencode_to_server, server_to_opencode
from relay.adapters.windsurf import WindsurfAdapter
from relay.adapters.zed import ZedAdapter, zed_to_server
from relay.core.schema import Rule, Server, Transport


def _servers_in(path, *key_path):
    data = json.loads(path.read_text())
    for key in key_path:
        data = data[key]
    return data


class TestCursor:
    def test_remote_dropped(self, home, filesystem_server, remote_server):
        adapter = CursorAdapter(home=home)
        outcome = adapter.write_servers([filesystem_server, remote_server])
        assert outcome.added == ["filesystem"]
        assert list(_servers_in(adapter.config_path(), "mcpServers")) == ["filesystem"]

    def test_rules_are_mdc(self, home):
        adapter = CursorAdapter(home=home)
        adapter.write_rules([Rule(name="py", content="Type hints.", globs=["*.py"], always_apply=True)])
        text = (home / ".cursor" / "rules" / "py.mdc").read_text()
        assert "globs:\n  - *.py\n" in text
        assert "alwaysApply: true" in text
        [rule] = adapter.read_rules()
        assert rule.globs == ["*.py"]
        assert rule.always_apply is True


class TestClaudeDesktop:
    def test_stdio_only(self, home, filesystem_server, remote_server):
        adapter = ClaudeDesktopAdapter(home=home)
        adapter.write_servers([filesystem_server, remote_server])
        assert [s.name for s in adapter.read_servers()] == ["filesystem"]


class TestGemini:
    def test_http_uses_http_url(self, remote_server):
        assert server_to_gemini(remote_server) == {"httpUrl": remote_server.url}

    def test_sse_uses_url(self):
        server = Server(name="s", url="https://x/sse", transport=Transport.sse)
        assert server_to_gemini(server) == {"url": "https://x/sse"}
        assert gemini_to_server("s", {"url": "https://x/sse"}).transport == Transport.sse

    def test_rules_in_gemini_md(self, home):
        adapter = GeminiAdapter(home=home)
        adapter.write_rules([Rule(name="style", content="Be terse.")])
        assert "## style" in (home / ".gemini" / "GEMINI.md").read_text()


class TestOpenCode:
    def test_command_array(self, filesystem_server):
        entry = server_to_opencode(filesystem_server)
        assert entry == {
            "type": "local",
            "command": ["npx", *filesystem_server.args],
            "enabled": True,
        }

    def test_environment_and_remote(self):
        local = server_to_opencode(Server(name="l", command="x", env={"A": "1"}))
        assert local["environment"] == {"A": "1"}
        remote = server_to_opencode(Server(name="r", url="https://x/mcp"))
        assert remote == {"type": "remote", "url": "https://x/mcp", "enabled": True}

    def test_parse(self):
        server = opencode_to_server("fs", {"type": "local", "command": ["npx", "-y", "pkg"], "enabled": False})
        assert server.command == "npx"
        assert server.args == ["-y", "pkg"]
        assert server.enabled is False

    def test_written_under_mcp(self, home, filesystem_server):
        adapter = OpenCodeAdapter(home=home)
        adapter.write_servers([filesystem_server])
        assert adapter.config_path() == home / ".config" / "opencode" / "opencode.json"
        assert "filesystem" in _servers_in(adapter.config_path(), "mcp")

    def test_agent_is_subagent(self, home, resources):
        adapter = OpenCodeAdapter(home=home)
        adapter.write_agents(resources.agents)
        assert "mode: subagent" in (adapter.tool_dir() / "agent" / "reviewer.md").read_text()


class TestZed:
    def test_context_servers(self, home, filesystem_server):
        adapter = ZedAdapter(home=home)
        adapter.write_servers([filesystem_server])
        entry = _servers_in(adapter.config_path(), "context_servers", "filesystem")
        assert entry["source"] == "custom"
        assert entry["command"] == "npx"

    def test_legacy_nested_command(self):
        server = zed_to_server(
            "old", {"command": {"path": "node", "args": ["srv.js"], "env": {"K": "v"}}}
        )
        assert server.command == "node"
        assert server.args == ["srv.js"]
        assert server.env == {"K": "v"}

    def test_keeps_other_settings(self, home, filesystem_server):
        adapter = ZedAdapter(home=home)
        adapter.config_path().parent.mkdir(parents=True)
        adapter.config_path().write_text('{"theme": "One Dark", "vim_mode": true}')
        adapter.write_servers([filesystem_server])
        data = json.loads(adapter.config_path().read_text())
        assert data["theme"] == "One Dark"
        assert data["vim_mode"] is True


class TestCline:
    def test_ui_defaults(self, home, filesystem_server):
        adapter = ClineAdapter(home=home)
        adapter.write_servers([filesystem_server])
        entry = _servers_in(adapter.config_path(), "mcpServers", "filesystem")
        assert entry["disabled"] is False
        assert entry["alwaysAllow"] == []


class TestWindsurf:
    def test_server_url(self, home, remote_server):
        adapter = WindsurfAdapter(home=home)
        adapter.write_servers([remote_server])
        entry = _servers_in(adapter.config_path(), "mcpServers", "linear")
        assert entry["serverUrl"] == remote_server.url
        assert adapter.read_servers()[0].url == remote_server.url

    def test_rules_file_in_home(self, home):
        WindsurfAdapter(home=home).write_rules([Rule(name="style", content="x")])
        assert (home / ".windsurfrules").is_file()


class TestContinue:
    def test_rules_md(self, home):
        adapter = ContinueAdapter(home=home)
        adapter.write_rules([Rule(name="style", content="x")])
        assert [r.name for r in adapter.read_rules()] == ["style"]
