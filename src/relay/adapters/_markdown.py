"""Resource <-> markdown file conversion for directory-backed adapters.

Commands, skills and agents use the Claude Code frontmatter conventions
(``argument-hint``, ``allowed-tools``, comma-separated ``tools``); the other
tools that read these directories accept the same shape. Cursor rules use
the ``.mdc`` keys (``description``, ``globs``, ``alwaysApply``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from relay.core.filestore import MarkdownDir
from relay.core.merge import MergeOutcome
from relay.core.schema import Agent, Command, Resource, Rule, Skill

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)

Metadata = dict[str, Any]


def _as_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str) and value.strip():
        return [v.strip() for v in value.split(",") if v.strip()]
    return []


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


# -- Commands --


def command_to_markdown(command: Command) -> tuple[Metadata, str]:
    return {
        "description": command.description,
        "argument-hint": command.argument_hint,
        "allowed-tools": ", ".join(command.allowed_tools),
        "model": command.model,
    }, command.prompt


def markdown_to_command(name: str, metadata: Metadata, body: str) -> Command:
    return Command(
        name=name,
        description=_as_str(metadata.get("description")),
        argument_hint=_as_str(metadata.get("argument-hint")),
        allowed_tools=_as_list(metadata.get("allowed-tools")),
        model=_as_str(metadata.get("model")),
        prompt=body.strip(),
    )


# -- Rules (Cursor .mdc) --


def rule_to_mdc(rule: Rule) -> tuple[Metadata, str]:
    return {
        "description": rule.description,
        "globs": list(rule.globs),
        "alwaysApply": rule.always_apply,
    }, rule.content


def mdc_to_rule(name: str, metadata: Metadata, body: str) -> Rule:
    return Rule(
        name=name,
        description=_as_str(metadata.get("description")),
        globs=_as_list(metadata.get("globs")),
        always_apply=metadata.get("alwaysApply") is True,
        content=body.strip(),
    )


# -- Skills --


def skill_to_markdown(skill: Skill) -> tuple[Metadata, str]:
    metadata: Metadata = {"name": skill.name, "description": skill.description}
    metadata.update({k: v for k, v in skill.extra.items() if k not in metadata})
    return metadata, skill.content


def markdown_to_skill(name: str, metadata: Metadata, body: str) -> Skill:
    extra = {k: v for k, v in metadata.items() if k not in ("name", "description")}
    return Skill(
        name=name,
        description=_as_str(metadata.get("description")),
        content=body.strip(),
        extra=extra,
    )


# -- Agents --


def agent_to_markdown(agent: Agent) -> tuple[Metadata, str]:
    return {
        "name": agent.name,
        "description": agent.description,
        "tools": ", ".join(agent.tools),
        "model": agent.model,
    }, agent.content


def markdown_to_agent(name: str, metadata: Metadata, body: str) -> Agent:
    return Agent(
        name=name,
        description=_as_str(metadata.get("description")),
        tools=_as_list(metadata.get("tools")),
        model=_as_str(metadata.get("model")),
        content=body.strip(),
    )


# -- Directory helpers --


def read_dir(directory: MarkdownDir, parse: Callable[[str, Metadata, str], R]) -> list[R]:
    """Every file in directory that converts cleanly, managed or not."""
    resources = []
    for name, metadata, body in directory.items():
        try:
            resources.append(parse(name, metadata, body))
        except ValidationError as e:
            logger.warning("Skipping %s in %s: %s", name, directory.directory, e)
    return resources


def write_dir(
    directory: MarkdownDir,
    resources: Sequence[R],
    render: Callable[[R], tuple[Metadata, str]],
) -> MergeOutcome:
    items: dict[str, tuple[Metadata, str]] = {}
    for resource in resources:
        if resource.name in items:
            logger.warning("Duplicate name '%s', keeping the first", resource.name)
            continue
        items[resource.name] = render(resource)
    return directory.merge(items)
