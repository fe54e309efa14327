"""Adapter protocols: the tool contract plus one narrow protocol per resource kind.

An adapter implements :class:`Adapter` and any subset of the capability
protocols. Callers never branch on the concrete adapter type; they probe
with :func:`capability_for` (or the ``as_*_adapter`` helpers) and treat a
missing capability as "nothing to do for this kind".
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from relay.core.merge import MergeOutcome
from relay.core.schema import Agent, Command, Resource, ResourceKind, Rule, Server, Skill
from relay.utils.paths import home_dir


@runtime_checkable
class Adapter(Protocol):
    """Interface that all adapters must implement."""

    name: str
    display_name: str

    def detect(self) -> bool:
        """Check if the tool is installed. Must not require its config file to exist."""
        ...

    def config_path(self) -> Path:
        """Primary native config file. May not exist yet."""
        ...

    def supported_resources(self) -> frozenset[ResourceKind]:
        ...


@runtime_checkable
class ServerAdapter(Protocol):
    def read_servers(self) -> list[Server]: ...

    def write_servers(self, servers: Sequence[Server]) -> MergeOutcome: ...


@runtime_checkable
class CommandsAdapter(Protocol):
    def read_commands(self) -> list[Command]: ...

    def write_commands(self, commands: Sequence[Command]) -> MergeOutcome: ...


@runtime_checkable
class RulesAdapter(Protocol):
    def read_rules(self) -> list[Rule]: ...

    def write_rules(self, rules: Sequence[Rule]) -> MergeOutcome: ...


@runtime_checkable
class SkillsAdapter(Protocol):
    def read_skills(self) -> list[Skill]: ...

    def write_skills(self, skills: Sequence[Skill]) -> MergeOutcome: ...


@runtime_checkable
class AgentsAdapter(Protocol):
    def read_agents(self) -> list[Agent]: ...

    def write_agents(self, agents: Sequence[Agent]) -> MergeOutcome: ...


CAPABILITIES: dict[ResourceKind, type] = {
    ResourceKind.server: ServerAdapter,
    ResourceKind.command: CommandsAdapter,
    ResourceKind.rule: RulesAdapter,
    ResourceKind.skill: SkillsAdapter,
    ResourceKind.agent: AgentsAdapter,
}


def capability_for(adapter: Adapter, kind: ResourceKind):
    """The adapter itself if it can read and write kind, else None."""
    if kind not in adapter.supported_resources():
        return None
    if not isinstance(adapter, CAPABILITIES[kind]):
        return None
    return adapter


def as_server_adapter(adapter: Adapter) -> ServerAdapter | None:
    return capability_for(adapter, ResourceKind.server)


def as_commands_adapter(adapter: Adapter) -> CommandsAdapter | None:
    return capability_for(adapter, ResourceKind.command)


def as_rules_adapter(adapter: Adapter) -> RulesAdapter | None:
    return capability_for(adapter, ResourceKind.rule)


def as_skills_adapter(adapter: Adapter) -> SkillsAdapter | None:
    return capability_for(adapter, ResourceKind.skill)


def as_agents_adapter(adapter: Adapter) -> AgentsAdapter | None:
    return capability_for(adapter, ResourceKind.agent)


def write_resources(
    adapter: Adapter, kind: ResourceKind, resources: Sequence[Resource]
) -> MergeOutcome | None:
    """Write resources of one kind; None (and no disk access) when unsupported."""
    target = capability_for(adapter, kind)
    if target is None:
        return None
    return getattr(target, f"write_{kind.plural}")(list(resources))


def read_resources(adapter: Adapter, kind: ResourceKind) -> list[Resource]:
    target = capability_for(adapter, kind)
    if target is None:
        return []
    return getattr(target, f"read_{kind.plural}")()


class ToolAdapter:
    """Common plumbing for the bundled adapters.

    Subclasses set ``name``, ``display_name`` and ``resources`` and implement
    ``tool_dir()`` and ``config_path()``. Detection is the presence of the
    tool's directory.
    """

    name: str = ""
    display_name: str = ""
    resources: frozenset[ResourceKind] = frozenset()

    def __init__(self, home: Path | None = None) -> None:
        self.home = home_dir(home)
        self._fake_home = home is not None

    @property
    def env_home(self) -> Path | None:
        """home when pointed at a fake home, None to use the real environment."""
        return self.home if self._fake_home else None

    def tool_dir(self) -> Path:
        return self.config_path().parent

    def detect(self) -> bool:
        return self.tool_dir().is_dir()

    def config_path(self) -> Path:
        raise NotImplementedError

    def supported_resources(self) -> frozenset[ResourceKind]:
        return self.resources

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
