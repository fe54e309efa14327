"""Rules rendered into a managed section of a single markdown file.

AGENTS.md, CLAUDE.md, GEMINI.md, ``.windsurfrules`` and Continue's
``rules.md`` are one file the user also edits. We own only the text between
the start/end markers; everything outside them is kept byte-for-byte.

Inside the section every rule sits between its own pair of markers, so a
rule body may use any markdown (``## headings`` included) and still reads
back whole.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from relay.core.document import atomic_write_text, read_text
from relay.core.errors import DocumentMalformedError
from relay.core.merge import MergeOutcome
from relay.core.schema import Rule

logger = logging.getLogger(__name__)

SECTION_START = "<!-- agent-relay:start -->"
SECTION_END = "<!-- agent-relay:end -->"
RULE_END = "<!-- agent-relay:rule-end -->"

_RULE_BLOCK = re.compile(
    r"<!-- agent-relay:rule (?P<name>.+?) -->\n(?P<body>.*?)" + re.escape(RULE_END),
    re.DOTALL,
)


def _rule_start(name: str) -> str:
    return f"<!-- agent-relay:rule {name} -->"


def split_managed(text: str, source: Path | None = None) -> tuple[str, str | None, str]:
    """(before, managed body or None, after).

    A start marker with no end marker after it is a malformed document:
    there is no way to tell where our text stops and the user's resumes.
    """
    start = text.find(SECTION_START)
    if start == -1:
        return text, None, ""
    end = text.find(SECTION_END, start)
    if end == -1:
        raise DocumentMalformedError(source or Path("<document>"), "unterminated agent-relay section")
    body_start = start + len(SECTION_START)
    return text[:start], text[body_start:end], text[end + len(SECTION_END) :]


def render_section(rules: Sequence[Rule]) -> str:
    lines = [SECTION_START, ""]
    for rule in rules:
        lines.append(_rule_start(rule.name))
        lines.append(f"## {rule.name}")
        lines.append("")
        if rule.content.strip():
            lines.append(rule.content.strip())
        lines.append(RULE_END)
        lines.append("")
    lines.append(SECTION_END)
    return "\n".join(lines)


def write_section(existing: str, rules: Sequence[Rule], source: Path | None = None) -> str:
    """Insert, replace or (for no rules) remove the managed section."""
    before, managed, after = split_managed(existing, source)

    if not rules:
        if managed is None:
            return existing
        if after.startswith("\n"):
            after = after[1:]
        return before + after

    section_text = render_section(rules)
    if managed is not None:
        return before + section_text + after
    if not existing:
        return section_text + "\n"
    separator = "\n" if existing.endswith("\n") else "\n\n"
    return existing + separator + section_text + "\n"


def _parse_managed(body: str) -> list[tuple[str, str]]:
    entries: list[tuple[str, str]] = []
    for match in _RULE_BLOCK.finditer(body):
        name = match.group("name").strip()
        content = match.group("body")
        heading = f"## {name}"
        if content.startswith(heading + "\n") or content.rstrip("\n") == heading:
            content = content[len(heading) :]
        entries.append((name, content.strip()))
    return entries


def _slugify(text: str) -> str:
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    return re.sub(r"-+", "-", text).strip("-")


def parse_rules(text: str, default_name: str, source: Path | None = None) -> list[Rule]:
    """Rules found in a file.

    Each marked block inside the managed section is one rule. Hand-written
    text outside it comes back as a single rule named default_name.
    """
    before, managed, after = split_managed(text, source)
    rules = [Rule(name=name, content=content) for name, content in _parse_managed(managed or "")]

    own = (before + after).strip()
    if own and default_name not in {r.name for r in rules}:
        rules.append(Rule(name=default_name, content=own))
    return rules


class ManagedSectionFile:
    """A single rules file with one managed section.

    The rule named default_name stands for the file's hand-written text. It
    is never written back into the section: doing so would duplicate the
    user's own text every sync.
    """

    def __init__(self, path: Path, default_name: str | None = None) -> None:
        self.path = path
        self.default_name = default_name or _slugify(path.name) or "rules"

    def read(self) -> list[Rule]:
        text = read_text(self.path)
        if text is None:
            return []
        return parse_rules(text, self.default_name, self.path)

    def write(self, rules: Sequence[Rule]) -> MergeOutcome:
        existing = read_text(self.path) or ""
        previous = [n for n, _ in _parse_managed(split_managed(existing, self.path)[1] or "")]

        outcome = MergeOutcome()
        kept: list[Rule] = []
        for rule in rules:
            if rule.name == self.default_name:
                logger.warning("Not writing rule '%s' over the hand-written text of %s", rule.name, self.path)
                outcome.skipped.append(rule.name)
                continue
            kept.append(rule)

        updated = write_section(existing, kept, self.path)
        if updated != existing:
            atomic_write_text(self.path, updated)
            logger.info("Updated managed section in %s", self.path)

        names = [r.name for r in kept]
        outcome.added = names
        outcome.removed = [n for n in previous if n not in names]
        return outcome
