"""Sub-agent definitions stored as markdown files.

A definition file opens with a YAML header holding ``SubAgentSpec`` fields.
Whatever follows the header is the sub-agent's system prompt::

    ---
    name: research-agent
    description: Gathers raw research findings for one sub-topic
    tools: [tavily_search, ls, read_file, write_file]
    requires-planning: true
    ---

    You are a dedicated researcher...
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from research_orchestrator.subagents.config import SubAgentSpec
from research_orchestrator.subagents.errors import SubagentConfigError

_HEADER = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)",
    re.S | re.M,
)

# Header keys that do not map onto a field by swapping '-' for '_'
_ALIASES = {"prompt": "system_prompt"}


def _field_name(key: str) -> str:
    return _ALIASES.get(key, key.replace("-", "_"))


def _split_definition(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Return the parsed YAML header and the stripped body of a definition."""
    found = _HEADER.match(text)
    if found is None:
        raise SubagentConfigError(path.stem, f"{path} has no '---' delimited YAML header")

    try:
        header = yaml.safe_load(found["header"])
    except yaml.YAMLError as exc:
        detail = f"{path} has an unreadable YAML header: {exc}"
        raise SubagentConfigError(path.stem, detail) from exc

    if header is None:
        header = {}
    if not isinstance(header, dict):
        raise SubagentConfigError(
            path.stem, f"{path} header is a {type(header).__name__}, expected a mapping"
        )
    return header, found["body"].strip()


def load_subagent_spec(path: Path) -> SubAgentSpec:
    """Load one sub-agent definition.

    The file stem names the sub-agent unless the header sets ``name``, and a
    non-empty body becomes ``system_prompt`` unless the header sets one.

    Raises:
        SubagentConfigError: The file is unreadable, lacks a YAML header, or
            describes an invalid spec.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SubagentConfigError(path.stem, f"{path} could not be read: {exc}") from exc

    header, body = _split_definition(text, path)
    fields = {_field_name(key): value for key, value in header.items()}
    fields.setdefault("name", path.stem)
    if body:
        fields.setdefault("system_prompt", body)

    try:
        return SubAgentSpec.model_validate(fields)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise SubagentConfigError(str(fields["name"]), f"invalid fields: {problems}") from exc


def discover_subagents(directory: Path) -> list[SubAgentSpec]:
    """Load every ``*.md`` definition in ``directory`` in filename order.

    A missing directory yields no specs.
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        return []

    specs: list[SubAgentSpec] = []
    for path in sorted(directory.glob("*.md")):
        if path.is_file():
            specs.append(load_subagent_spec(path))
    return specs
