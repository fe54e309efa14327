"""Tests for the canonical resource models."""

import pytest
from pydantic import ValidationError

from relay.core.schema import (
    CanonicalSet,
    Command,
    ResourceKind,
    ResourceScope,
    Rule,
    Server,
    Transport,
)


class TestServer:
    def test_stdio_is_local(self, filesystem_server):
        assert not filesystem_server.is_remote

    def test_url_only_is_remote(self):
        assert Server(name="r", url="https://example.com/mcp").is_remote

    def test_sse_is_remote(self, remote_server):
        assert remote_server.model_copy(update={"transport": Transport.sse}).is_remote

    def test_native_name_prefers_namespace(self):
        assert Server(name="fs", command="x").native_name == "fs"
        assert Server(name="fs", command="x", namespace="team-fs").native_name == "team-fs"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Server(name="  ", command="x")


class TestIdentity:
    def test_kind_and_name(self):
        assert Rule(name="style").identity == (ResourceKind.rule, "style")

    def test_case_sensitive(self):
        assert Command(name="Review").identity != Command(name="review").identity


class TestCanonicalSet:
    def test_from_resources(self):
        s = CanonicalSet.from_resources([Rule(name="a"), Server(name="b", command="x"), Rule(name="c")])
        assert [r.name for r in s.rules] == ["a", "c"]
        assert s.names(ResourceKind.server) == {"b"}
        assert len(s) == 3

    def test_active_drops_disabled(self):
        s = CanonicalSet(
            servers=[Server(name="on", command="x"), Server(name="off", command="x", enabled=False)],
            rules=[Rule(name="r", enabled=False)],
        )
        active = s.active()
        assert [x.name for x in active.servers] == ["on"]
        assert active.rules == []
        assert len(s) == 3

    def test_filter_scope(self):
        s = CanonicalSet(
            rules=[Rule(name="g"), Rule(name="l", scope=ResourceScope.local)],
        )
        assert [r.name for r in s.filter_scope(ResourceScope.local).rules] == ["l"]

    def test_by_kind_covers_every_kind(self, resources):
        by_kind = resources.by_kind()
        assert set(by_kind) == set(ResourceKind)
        assert len(by_kind[ResourceKind.server]) == 2
