"""Adapter discovery and registration."""

from __future__ import annotations

import logging
from pathlib import Path

from relay.adapters.base import Adapter
from relay.adapters.claude import ClaudeAdapter
from relay.adapters.claude_desktop import ClaudeDesktopAdapter
from relay.adapters.cline import ClineAdapter
from relay.adapters.codex import CodexAdapter
from relay.adapters.continue_dev import ContinueAdapter
from relay.adapters.copilot import CopilotAdapter
from relay.adapters.cursor import CursorAdapter
from relay.adapters.gemini import GeminiAdapter
from relay.adapters.opencode import OpenCodeAdapter
from relay.adapters.windsurf import WindsurfAdapter
from relay.adapters.zed import ZedAdapter

logger = logging.getLogger(__name__)

# Adding a tool means adding its module and one line here.
ADAPTER_CLASSES = (
    ClaudeAdapter,
    ClaudeDesktopAdapter,
    CursorAdapter,
    CodexAdapter,
    GeminiAdapter,
    OpenCodeAdapter,
    ZedAdapter,
    WindsurfAdapter,
    ClineAdapter,
    ContinueAdapter,
    CopilotAdapter,
)


class AdapterRegistry:
    """Adapters in registration order, keyed by name."""

    def __init__(self, adapters: list[Adapter] | None = None) -> None:
        self._adapters: dict[str, Adapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.debug("Replacing adapter '%s'", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def all(self) -> list[Adapter]:
        return list(self._adapters.values())

    def detected(self) -> list[Adapter]:
        """Adapters whose tool is present on this machine."""
        return [a for a in self._adapters.values() if a.detect()]

    def names(self) -> list[str]:
        return list(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    def __contains__(self, name: object) -> bool:
        return name in self._adapters


def default_registry(home: Path | None = None) -> AdapterRegistry:
    """A registry holding one instance of every bundled adapter."""
    return AdapterRegistry([cls(home=home) for cls in ADAPTER_CLASSES])
