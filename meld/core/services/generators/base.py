"""
Generator base — the contract between the orchestrator and every output format.

A generator turns (config, composed context) into GeneratedFile
objects. It never touches the filesystem for writing; the writer
does that. Generators don't report errors either: everything that can
go wrong with the input is caught by schema validation first.

To add a coding agent:
    1. Subclass AgentGenerator
    2. Set ``name`` and implement ``generate``
    3. Register the class in AGENT_GENERATORS (generators/__init__.py)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from meld.core.models.config import McpHttpServer, McpServer, McpStdioServer, MeldConfig
from meld.core.models.context import ComposedContext, SkillMeta
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.utils import deep_merge


class Generator(ABC):
    """Anything that produces files for a generation pass."""

    name: str

    @abstractmethod
    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        """Produce files. Paths are relative to the generator's own root."""


class AgentGenerator(Generator):
    """Shared behavior for the per-agent generators.

    Subclasses set ``name`` to their agent identifier; everything
    agent-keyed (MCP scope, skill model maps, overrides) uses it.
    """

    def build_instructions(self, context: ComposedContext) -> str:
        sections = [context.hub_preamble]
        if context.project_table:
            sections.append(context.project_table)
        sections.append(context.artifacts_section)
        if context.context:
            sections.append(context.context)
        return "\n\n".join(sections) + "\n"

    def mcp_servers(self, config: MeldConfig) -> dict[str, McpServer]:
        """Servers whose ``agents`` scope admits this agent, in config order."""
        return {name: server for name, server in config.mcp.items() if server.allows(self.name)}

    def mcp_json_servers(self, config: MeldConfig) -> dict[str, dict[str, Any]]:
        """``mcpServers`` object in the JSON shape shared by Claude and Gemini."""
        servers: dict[str, dict[str, Any]] = {}
        for name, server in self.mcp_servers(config).items():
            if isinstance(server, McpHttpServer):
                entry: dict[str, Any] = {"type": "http", "url": server.url}
                if server.headers is not None:
                    entry["headers"] = server.headers
            elif isinstance(server, McpStdioServer):
                entry = {"command": server.command, "args": server.args}
            else:
                raise TypeError(f"Unknown MCP server type: {type(server).__name__}")
            if server.env is not None:
                entry["env"] = server.env
            servers[name] = entry
        return servers

    def context_files(self, context: ComposedContext) -> list[GeneratedFile]:
        return [GeneratedFile(path=f.path, content=f.content) for f in context.context_files]

    def apply_overrides(self, config: MeldConfig, settings: dict[str, Any]) -> dict[str, Any]:
        overrides = config.agent(self.name).overrides
        if overrides:
            return deep_merge(settings, overrides)
        return settings

    def resolve_frontmatter(self, skill: SkillMeta) -> dict[str, Any]:
        """Skill frontmatter with ``model`` resolved for this agent.

        A plain model string passes through. A per-agent map is replaced
        by this agent's entry, or dropped when it has none.
        """
        fm = dict(skill.frontmatter)
        model = fm.get("model")
        if isinstance(model, dict):
            if self.name in model:
                fm["model"] = model[self.name]
            else:
                del fm["model"]
        return fm

    def render_skill(self, skill: SkillMeta) -> str:
        lines = _frontmatter_lines(self.resolve_frontmatter(skill))
        return "---\n" + "\n".join(lines) + "\n---\n\n" + skill.body


def _frontmatter_lines(fm: dict[str, Any]) -> list[str]:
    lines: list[str] = []
    for key, value in fm.items():
        if isinstance(value, bool):
            lines.append(f"{key}: {'true' if value else 'false'}")
        elif isinstance(value, (str, int, float)):
            lines.append(f"{key}: {value}")
        elif isinstance(value, list):
            lines.append(f"{key}: [{', '.join(str(item) for item in value)}]")
    return lines
