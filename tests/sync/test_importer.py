"""Tests for the import orchestrator."""

import json

import pytest

from relay.adapters.claude import ClaudeAdapter
from relay.adapters.zed import ZedAdapter
from relay.core.results import ImportPreview
from relay.core.schema import CanonicalSet, ResourceKind, ResourceScope, Rule, Server
from relay.core.store import ResourceStore
from relay.sync.engine import sync_adapter
from relay.sync.importer import commit_import, preview_import


@pytest.fixture
def claude(home):
    adapter = ClaudeAdapter(home=home)
    adapter.config_path().write_text(
        json.dumps(
            {
                "mcpServers": {
                    "filesystem": {"command": "npx", "args": ["-y", "other"]},
                    "github": {"command": "gh-mcp"},
                }
            }
        )
    )
    return adapter


class FlakyWriter:
    """Saves everything except names listed in fail_on."""

    def __init__(self, fail_on):
        self.fail_on = set(fail_on)
        self.saved = []

    def save(self, resource):
        if resource.name in self.fail_on:
            raise OSError("disk full")
        self.saved.append(resource)


class TestPreview:
    def test_existing_names_skipped(self, claude, filesystem_server):
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet(servers=[filesystem_server]))
        assert [s.name for s in preview.servers] == ["github"]
        assert preview.skipped == [(ResourceKind.server, "filesystem")]

    def test_same_name_different_kind_is_not_a_duplicate(self, claude):
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet(rules=[Rule(name="github")]))
        assert {s.name for s in preview.servers} == {"filesystem", "github"}

    def test_all_kinds_by_default(self, claude, home):
        (home / ".claude" / "commands").mkdir(parents=True)
        (home / ".claude" / "commands" / "deploy.md").write_text("Ship it\n")
        preview = preview_import(claude, None, CanonicalSet())
        assert [c.name for c in preview.commands] == ["deploy"]
        assert preview.total == 3

    def test_unsupported_kind_ignored(self, home):
        preview = preview_import(ZedAdapter(home=home), [ResourceKind.rule], CanonicalSet())
        assert preview.is_empty
        assert preview.read_errors == {}

    def test_read_error_recorded(self, claude):
        claude.config_path().write_text("{nope")
        preview = preview_import(claude, None, CanonicalSet())
        assert ResourceKind.server in preview.read_errors
        assert preview.servers == []

    def test_to_dict(self, claude, filesystem_server):
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet(servers=[filesystem_server]))
        assert preview.to_dict() == {
            "tool": "claude",
            "queued": {"servers": ["github"]},
            "skipped": ["server filesystem"],
            "read_errors": {},
        }


class TestCommit:
    def test_into_store(self, claude, tmp_path):
        store = ResourceStore(tmp_path / "store")
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet())
        result = commit_import(preview, store)
        assert result.counts == {ResourceKind.server: 2}
        assert {s.name for s in store.load().servers} == {"filesystem", "github"}

    def test_partial_failure(self, claude):
        writer = FlakyWriter(fail_on=["github"])
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet())
        result = commit_import(preview, writer)
        assert [s.name for s in writer.saved] == ["filesystem"]
        assert result.total == 1
        assert result.errors == ["server github: disk full"]

    def test_scope_override(self, claude):
        writer = FlakyWriter(fail_on=[])
        preview = preview_import(claude, [ResourceKind.server], CanonicalSet())
        commit_import(preview, writer, scope=ResourceScope.local)
        assert {s.scope for s in writer.saved} == {ResourceScope.local}
        assert all(s.scope == ResourceScope.global_ for s in preview.servers)

    def test_reimport_is_empty(self, claude, tmp_path):
        store = ResourceStore(tmp_path / "store")
        commit_import(preview_import(claude, None, CanonicalSet()), store)
        assert preview_import(claude, None, store.load()).is_empty

    def test_nothing_queued(self):
        assert commit_import(ImportPreview(tool="x"), FlakyWriter([])).total == 0


def test_server_model_round_trip_through_import(claude, tmp_path):
    store = ResourceStore(tmp_path / "store")
    commit_import(preview_import(claude, [ResourceKind.server], CanonicalSet()), store)
    by_name = {s.name: s for s in store.load().servers}
    assert by_name["filesystem"] == Server(name="filesystem", command="npx", args=["-y", "other"])


def test_imported_own_text_is_not_synced_back(home, tmp_path):
    adapter = ClaudeAdapter(home=home)
    claude_md = home / ".claude" / "CLAUDE.md"
    claude_md.parent.mkdir()
    claude_md.write_text("Always write tests.\n")

    store = ResourceStore(tmp_path / "store")
    commit_import(preview_import(adapter, [ResourceKind.rule], CanonicalSet()), store)
    assert [r.name for r in store.load().rules] == ["claude-md"]

    result = sync_adapter(adapter, store.load(), kinds=[ResourceKind.rule], backup=False)
    assert result.error is None
    assert result.skipped == ["claude-md"]
    assert claude_md.read_text() == "Always write tests.\n"
