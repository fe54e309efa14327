"""Shared fixtures: an isolated fake home, sample canonical resources."""

from __future__ import annotations

from pathlib import Path

import pytest

from relay.core.schema import Agent, CanonicalSet, Command, Rule, Server, Skill, Transport


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A fake home directory; HOME and the global config dir point into it."""
    fake = tmp_path / "home"
    fake.mkdir()
    monkeypatch.setenv("HOME", str(fake))
    monkeypatch.setenv("USERPROFILE", str(fake))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setenv("RELAY_CONFIG_DIR", str(fake / ".config" / "agent-relay"))
    return fake


@pytest.fixture
def filesystem_server() -> Server:
    return Server(
        name="filesystem",
        command="npx",
        args=["-y", "@modelcontextprotocol/server-filesystem", "/tmp"],
    )


@pytest.fixture
def remote_server() -> Server:
    return Server(name="linear", url="https://mcp.linear.app/mcp", transport=Transport.http)


@pytest.fixture
def resources(filesystem_server: Server, remote_server: Server) -> CanonicalSet:
    return CanonicalSet(
        servers=[filesystem_server, remote_server],
        commands=[
            Command(
                name="review",
                description="Review the current diff",
                prompt="Review the staged changes and list problems.",
                allowed_tools=["Bash", "Read"],
            )
        ],
        rules=[
            Rule(name="style", content="Use ruff and keep functions short.", description="Code style"),
        ],
        skills=[
            Skill(name="release", description="Cut a release", content="# Release\n\nBump, tag, push."),
        ],
        agents=[
            Agent(
                name="reviewer",
                description="Reviews pull requests",
                content="You review code carefully.",
                tools=["Read", "Grep"],
            )
        ],
    )
