"""Canonical resource store on disk.

Layout of a store root (``<project>/.agent-relay/`` or the global config dir):

    servers.json                name -> server fields
    commands/<name>.json
    rules/<name>.md             frontmatter + rule text
    skills/<name>/SKILL.md
    agents/<name>.md            frontmatter + system prompt
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from relay.core.document import JsonDocument, atomic_write_text, read_text
from relay.core.errors import DocumentMalformedError
from relay.core.frontmatter import build_frontmatter, parse_frontmatter
from relay.core.schema import (
    Agent,
    CanonicalSet,
    Command,
    Resource,
    ResourceKind,
    ResourceScope,
    Rule,
    Server,
    Skill,
)
from relay.utils.config import global_config_dir
from relay.utils.paths import check_name, find_project_root, store_path

logger = logging.getLogger(__name__)

_MARKDOWN_MODELS: dict[ResourceKind, type[Resource]] = {
    ResourceKind.rule: Rule,
    ResourceKind.skill: Skill,
    ResourceKind.agent: Agent,
}
_SKILL_FIELDS = {"description", "enabled"}


@runtime_checkable
class ResourceWriter(Protocol):
    def save(self, resource: Resource) -> None: ...


@runtime_checkable
class ResourceReader(Protocol):
    def load(self) -> CanonicalSet: ...


class ResourceStore:
    """Reads and writes one scope's canonical resources under root."""

    def __init__(self, root: Path, scope: ResourceScope = ResourceScope.global_) -> None:
        self.root = root
        self.scope = scope

    @property
    def servers_path(self) -> Path:
        return self.root / "servers.json"

    def path_for(self, kind: ResourceKind, name: str) -> Path:
        check_name(name)
        if kind == ResourceKind.server:
            return self.servers_path
        if kind == ResourceKind.command:
            return self.root / "commands" / f"{name}.json"
        if kind == ResourceKind.skill:
            return self.root / "skills" / name / "SKILL.md"
        return self.root / kind.plural / f"{name}.md"

    # -- Write --

    def save(self, resource: Resource) -> None:
        """Create or overwrite resource by name."""
        path = self.path_for(resource.kind, resource.name)
        if isinstance(resource, Server):
            doc = JsonDocument.load(path)
            doc.tree[resource.name] = resource.model_dump(
                mode="json", exclude={"name", "scope"}, exclude_defaults=True
            )
            doc.save()
        elif isinstance(resource, Command):
            data = resource.model_dump(mode="json", exclude={"scope"}, exclude_defaults=True)
            atomic_write_text(path, json.dumps(data, indent=2) + "\n")
        else:
            atomic_write_text(path, _to_markdown(resource))
        logger.debug("Saved %s '%s' to %s", resource.kind.value, resource.name, path)

    # -- Read --

    def load(self) -> CanonicalSet:
        """Every readable resource; unreadable files are logged and skipped."""
        result = CanonicalSet()
        result.servers.extend(self._load_servers())
        result.commands.extend(self._load_commands())
        for kind, model in _MARKDOWN_MODELS.items():
            result.of(kind).extend(self._load_markdown(kind, model))
        return result

    def _load_servers(self) -> list[Server]:
        try:
            tree = JsonDocument.load(self.servers_path).tree
        except DocumentMalformedError as e:
            logger.warning("Skipping servers: %s", e)
            return []
        servers = []
        for name, entry in tree.items():
            try:
                servers.append(Server.model_validate({**entry, "name": name, "scope": self.scope}))
            except (TypeError, ValidationError) as e:
                logger.warning("Skipping server '%s' in %s: %s", name, self.servers_path, e)
        return servers

    def _load_commands(self) -> list[Command]:
        directory = self.root / "commands"
        if not directory.is_dir():
            return []
        commands = []
        for path in sorted(directory.glob("*.json")):
            try:
                data = json.loads(path.read_text())
                commands.append(
                    Command.model_validate({**data, "name": path.stem, "scope": self.scope})
                )
            except (json.JSONDecodeError, TypeError, ValidationError) as e:
                logger.warning("Skipping command %s: %s", path, e)
        return commands

    def _load_markdown(self, kind: ResourceKind, model: type[Resource]) -> list[Resource]:
        directory = self.root / kind.plural
        if not directory.is_dir():
            return []
        if kind == ResourceKind.skill:
            paths = sorted(p for p in directory.glob("*/SKILL.md"))
        else:
            paths = sorted(directory.glob("*.md"))
        loaded = []
        for path in paths:
            name = path.parent.name if kind == ResourceKind.skill else path.stem
            text = read_text(path)
            if text is None:
                continue
            try:
                loaded.append(_from_markdown(model, name, self.scope, text))
            except ValidationError as e:
                logger.warning("Skipping %s %s: %s", kind.value, path, e)
        return loaded


def _to_markdown(resource: Resource) -> str:
    metadata: dict[str, Any] = resource.model_dump(
        mode="json", exclude={"name", "scope", "content", "extra"}, exclude_defaults=True
    )
    if isinstance(resource, Skill):
        metadata = {"name": resource.name, **metadata, **resource.extra}
    return build_frontmatter(metadata, resource.content)


def _from_markdown(model: type[Resource], name: str, scope: ResourceScope, text: str) -> Resource:
    metadata, body = parse_frontmatter(text)
    metadata.pop("name", None)
    if model is Skill:
        extra = {k: v for k, v in metadata.items() if k not in _SKILL_FIELDS}
        known = {k: v for k, v in metadata.items() if k in _SKILL_FIELDS}
        return Skill(name=name, scope=scope, content=body, extra=extra, **known)
    return model.model_validate({**metadata, "name": name, "scope": scope, "content": body})


def global_store() -> ResourceStore:
    return ResourceStore(global_config_dir(), ResourceScope.global_)


def local_store(project_root: Path | None = None) -> ResourceStore | None:
    root = project_root or find_project_root()
    if root is None:
        return None
    return ResourceStore(store_path(root), ResourceScope.local)


def load_canonical(project_root: Path | None = None) -> CanonicalSet:
    """Global resources plus the project's local ones.

    A local resource shadows a global one with the same kind and name.
    """
    merged = global_store().load()
    local = local_store(project_root)
    if local is None:
        return merged
    local_set = local.load()
    for kind in ResourceKind:
        local_names = local_set.names(kind)
        kept = [r for r in merged.of(kind) if r.name not in local_names]
        merged.of(kind)[:] = kept + local_set.of(kind)
    return merged
