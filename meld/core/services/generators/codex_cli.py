"""
Codex CLI generator — AGENTS.md, .codex/config.toml and .agents/skills/.

Codex has no slash commands, so hub commands become skills with a
``meld-cmd-`` prefix next to the real skills.
"""

from __future__ import annotations

from typing import Any

from meld.core.models.config import McpHttpServer, McpStdioServer, MeldConfig
from meld.core.models.context import ComposedContext
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.base import AgentGenerator
from meld.core.services.generators.utils import serialize_toml


class CodexCliGenerator(AgentGenerator):
    name = "codex-cli"

    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        files = [
            GeneratedFile(path="AGENTS.md", content=self.build_instructions(context)),
            GeneratedFile(
                path=".codex/config.toml",
                content=serialize_toml(self.build_config(config, context.hub_dir)),
            ),
        ]

        for command in context.commands:
            files.append(GeneratedFile(
                path=f".agents/skills/meld-cmd-{command.name}/SKILL.md",
                content=command.content,
            ))

        for skill in context.skills:
            files.append(GeneratedFile(
                path=f".agents/skills/meld-{skill.name}/SKILL.md",
                content=self.render_skill(skill),
            ))

        files.extend(self.context_files(context))
        return files

    def build_config(self, config: MeldConfig, hub_dir: str) -> dict[str, Any]:
        # dict.fromkeys keeps first-seen order while dropping duplicates
        writable_roots = list(dict.fromkeys(
            [hub_dir, *(project.path for project in config.projects.values())]
        ))

        document: dict[str, Any] = {
            "approval_policy": "on-request",
            "sandbox_mode": "workspace-write",
            "sandbox_workspace_write": {"writable_roots": writable_roots},
        }

        servers = self.build_mcp_servers(config)
        if servers:
            document["mcp_servers"] = servers

        return self.apply_overrides(config, document)

    def build_mcp_servers(self, config: MeldConfig) -> dict[str, dict[str, Any]]:
        servers: dict[str, dict[str, Any]] = {}
        for name, server in self.mcp_servers(config).items():
            if isinstance(server, McpHttpServer):
                entry: dict[str, Any] = {"url": server.url}
                if server.headers:
                    entry["http_headers"] = server.headers
            elif isinstance(server, McpStdioServer):
                entry = {"command": server.command, "args": server.args}
            else:
                raise TypeError(f"Unknown MCP server type: {type(server).__name__}")
            if server.env:
                entry["env"] = server.env
            servers[name] = entry
        return servers
