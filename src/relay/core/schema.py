"""Pydantic v2 models for the canonical, tool-agnostic resources."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Iterable

from pydantic import BaseModel, Field, field_validator


class ResourceKind(str, Enum):
    server = "server"
    command = "command"
    rule = "rule"
    skill = "skill"
    agent = "agent"

    @property
    def plural(self) -> str:
        return f"{self.value}s"


class ResourceScope(str, Enum):
    local = "local"
    global_ = "global"


class Transport(str, Enum):
    stdio = "stdio"
    http = "http"
    sse = "sse"


# -- Resources --


class Resource(BaseModel):
    """Fields shared by every resource kind.

    Identity for merge and de-duplication is ``(kind, name)``; names are
    case-sensitive.
    """

    kind: ClassVar[ResourceKind]

    name: str
    scope: ResourceScope = ResourceScope.global_
    enabled: bool = True

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name cannot be empty")
        return value

    @property
    def identity(self) -> tuple[ResourceKind, str]:
        return (self.kind, self.name)


class Server(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.server

    command: str = ""
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    transport: Transport = Transport.stdio
    url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    # Written under this name instead of `name` when two servers would clash
    namespace: str = ""

    @property
    def is_remote(self) -> bool:
        return self.transport in (Transport.http, Transport.sse) or (
            bool(self.url) and not self.command
        )

    @property
    def native_name(self) -> str:
        return self.namespace or self.name


class Command(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.command

    description: str = ""
    prompt: str = ""
    argument_hint: str = ""
    allowed_tools: list[str] = Field(default_factory=list)
    model: str = ""


class Rule(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.rule

    content: str = ""
    description: str = ""
    globs: list[str] = Field(default_factory=list)
    always_apply: bool = False


class Skill(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.skill

    description: str = ""
    content: str = ""  # SKILL.md body, without frontmatter
    extra: dict[str, Any] = Field(default_factory=dict)


class Agent(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.agent

    description: str = ""
    content: str = ""  # system prompt
    model: str = ""
    tools: list[str] = Field(default_factory=list)


# -- Collections --


class CanonicalSet(BaseModel):
    """The canonical resources handed to the engine for one call."""

    servers: list[Server] = Field(default_factory=list)
    commands: list[Command] = Field(default_factory=list)
    rules: list[Rule] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    agents: list[Agent] = Field(default_factory=list)

    @classmethod
    def from_resources(cls, resources: Iterable[Resource]) -> CanonicalSet:
        result = cls()
        for resource in resources:
            result.of(resource.kind).append(resource)
        return result

    def of(self, kind: ResourceKind) -> list:
        return getattr(self, kind.plural)

    def names(self, kind: ResourceKind) -> set[str]:
        return {r.name for r in self.of(kind)}

    def identities(self) -> set[tuple[ResourceKind, str]]:
        return {r.identity for kind in ResourceKind for r in self.of(kind)}

    def active(self) -> CanonicalSet:
        """Copy without disabled resources."""
        return CanonicalSet(
            **{kind.plural: [r for r in self.of(kind) if r.enabled] for kind in ResourceKind}
        )

    def by_kind(self) -> dict[ResourceKind, list[Resource]]:
        return {kind: list(self.of(kind)) for kind in ResourceKind}

    def filter_scope(self, scope: ResourceScope) -> CanonicalSet:
        return CanonicalSet(
            **{kind.plural: [r for r in self.of(kind) if r.scope == scope] for kind in ResourceKind}
        )

    def __len__(self) -> int:
        return sum(len(self.of(kind)) for kind in ResourceKind)
