"""Tests for the canonical resource store."""

import json

import pytest

from relay.core.errors import InvalidNameError
from relay.core.schema import (
    Agent,
    Command,
    ResourceKind,
    ResourceScope,
    Rule,
    Server,
    Skill,
)
from relay.core.store import ResourceReader, ResourceStore, ResourceWriter, load_canonical


@pytest.fixture
def store(tmp_path):
    return ResourceStore(tmp_path / "store")


class TestSave:
    def test_layout(self, store, resources):
        for kind in ResourceKind:
            for resource in resources.of(kind):
                store.save(resource)
        root = store.root
        assert json.loads((root / "servers.json").read_text())["filesystem"]["command"] == "npx"
        assert (root / "commands" / "review.json").is_file()
        assert (root / "rules" / "style.md").is_file()
        assert (root / "skills" / "release" / "SKILL.md").is_file()
        assert (root / "agents" / "reviewer.md").is_file()

    def test_overwrite_by_name(self, store):
        store.save(Server(name="fs", command="old"))
        store.save(Server(name="fs", command="new"))
        assert json.loads(store.servers_path.read_text()) == {"fs": {"command": "new"}}

    def test_rejects_path_traversal(self, store):
        with pytest.raises(InvalidNameError):
            store.save(Rule(name="../escape", content="x"))

    def test_satisfies_protocols(self, store):
        assert isinstance(store, ResourceWriter)
        assert isinstance(store, ResourceReader)


class TestLoad:
    def test_saved_resources_come_back(self, store, resources):
        for kind in ResourceKind:
            for resource in resources.of(kind):
                store.save(resource)
        loaded = store.load()
        assert loaded.identities() == resources.identities()
        assert loaded.servers[0].args == resources.servers[0].args
        assert loaded.commands[0].allowed_tools == ["Bash", "Read"]
        assert loaded.rules[0].description == "Code style"
        assert loaded.skills[0].content == "# Release\n\nBump, tag, push.\n"
        assert loaded.agents[0].tools == ["Read", "Grep"]

    def test_disabled_flag_survives(self, store):
        store.save(Rule(name="off", content="x", enabled=False))
        store.save(Server(name="off", command="x", enabled=False))
        loaded = store.load()
        assert loaded.rules[0].enabled is False
        assert loaded.servers[0].enabled is False

    def test_skill_extra_metadata(self, store):
        store.save(Skill(name="s", description="d", content="c", extra={"license": "MIT"}))
        [skill] = store.load().skills
        assert skill.extra == {"license": "MIT"}

    def test_bad_files_are_skipped(self, store):
        store.save(Command(name="good", prompt="p"))
        (store.root / "commands" / "bad.json").write_text("{oops")
        store.servers_path.write_text('{"ok": {"command": "x"}, "bad": "nope"}')
        loaded = store.load()
        assert [c.name for c in loaded.commands] == ["good"]
        assert [s.name for s in loaded.servers] == ["ok"]

    def test_scope_is_applied(self, tmp_path):
        store = ResourceStore(tmp_path, ResourceScope.local)
        store.save(Agent(name="a", content="x"))
        assert store.load().agents[0].scope == ResourceScope.local


class TestLoadCanonical:
    def test_local_shadows_global(self, home, tmp_path):
        project = tmp_path / "project"
        (project / ".agent-relay").mkdir(parents=True)
        ResourceStore(home / ".config" / "agent-relay").save(Server(name="fs", command="global"))
        ResourceStore(home / ".config" / "agent-relay").save(Server(name="only-global", command="g"))
        ResourceStore(project / ".agent-relay", ResourceScope.local).save(
            Server(name="fs", command="local")
        )
        merged = load_canonical(project)
        by_name = {s.name: s for s in merged.servers}
        assert by_name["fs"].command == "local"
        assert by_name["fs"].scope == ResourceScope.local
        assert by_name["only-global"].scope == ResourceScope.global_
