"""Tests for capability probing and kind dispatch."""

from relay.adapters.base import (
    as_agents_adapter,
    as_rules_adapter,
    as_server_adapter,
    capability_for,
    read_resources,
    write_resources,
)
from relay.adapters.claude import ClaudeAdapter
from relay.adapters.zed import ZedAdapter
from relay.core.schema import ResourceKind, Rule


class ServersOnly:
    """Implements the server methods but claims no kinds."""

    name = "fake"
    display_name = "Fake"

    def detect(self):
        return True

    def config_path(self):
        raise AssertionError("should not be touched")

    def supported_resources(self):
        return frozenset()

    def read_servers(self):
        raise AssertionError("should not be called")

    def write_servers(self, servers):
        raise AssertionError("should not be called")


class TestCapabilities:
    def test_probe_supported(self, home):
        claude = ClaudeAdapter(home=home)
        assert as_server_adapter(claude) is claude
        assert as_agents_adapter(claude) is claude

    def test_probe_unsupported(self, home):
        assert as_rules_adapter(ZedAdapter(home=home)) is None

    def test_declared_kinds_gate_methods(self):
        assert capability_for(ServersOnly(), ResourceKind.server) is None


class TestDispatch:
    def test_unsupported_kind_is_silent_and_touches_nothing(self, home):
        zed = ZedAdapter(home=home)
        assert write_resources(zed, ResourceKind.rule, [Rule(name="r", content="x")]) is None
        assert read_resources(zed, ResourceKind.rule) == []
        assert not any(home.iterdir())

    def test_fake_adapter_never_called(self):
        assert write_resources(ServersOnly(), ResourceKind.server, []) is None

    def test_write_returns_outcome(self, home, resources):
        outcome = write_resources(ClaudeAdapter(home=home), ResourceKind.rule, resources.rules)
        assert outcome.added == ["style"]


class TestToolAdapter:
    def test_repr(self, home):
        assert repr(ZedAdapter(home=home)) == "<ZedAdapter zed>"

    def test_env_home(self, home):
        assert ZedAdapter(home=home).env_home == home
        assert ZedAdapter().env_home is None
