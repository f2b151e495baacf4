"""
Claude Code generator — CLAUDE.md, .mcp.json and .claude/ settings.

Settings grant read/write access to the hub and every registered
project, plus a fixed set of tools and shell commands that can't
damage anything outside those paths.
"""

from __future__ import annotations

from typing import Any

from meld.core.models.config import MeldConfig
from meld.core.models.context import ComposedContext
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.base import AgentGenerator
from meld.core.services.generators.utils import dump_json

# Not path-scoped
SAFE_TOOLS = ("Task", "WebSearch", "WebFetch", "ToolSearch")

# Prefix-matched; flags break path scoping so these stay unscoped
SAFE_BASH_COMMANDS = (
    "cd", "ls", "mkdir", "cp", "mv", "cat",
    "git", "gh",
    "node", "npx", "npm", "yarn", "pnpm", "bun",
    "which", "pwd", "ast-grep",
)

PATH_SCOPED_TOOLS = ("Read", "Glob", "Grep", "Write", "Edit")


class ClaudeCodeGenerator(AgentGenerator):
    name = "claude-code"

    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        files = [
            GeneratedFile(path="CLAUDE.md", content=self.build_instructions(context)),
            GeneratedFile(
                path=".mcp.json",
                content=dump_json({"mcpServers": self.mcp_json_servers(config)}),
            ),
            GeneratedFile(
                path=".claude/settings.json",
                content=dump_json(self.build_settings(config, context.hub_dir)),
            ),
        ]

        for command in context.commands:
            files.append(GeneratedFile(
                path=f".claude/commands/meld/{command.name}.md",
                content=command.content,
            ))

        for skill in context.skills:
            files.append(GeneratedFile(
                path=f".claude/skills/meld-{skill.name}/SKILL.md",
                content=self.render_skill(skill),
            ))

        files.extend(self.context_files(context))
        return files

    def build_settings(self, config: MeldConfig, hub_dir: str) -> dict[str, Any]:
        allow: list[str] = list(SAFE_TOOLS)
        allow.extend(f"Bash(command:{cmd} *)" for cmd in SAFE_BASH_COMMANDS)
        allow.extend(path_permissions(hub_dir))

        additional_directories: list[str] = []
        for project in config.projects.values():
            allow.extend(path_permissions(project.path))
            additional_directories.append(project.path)

        settings: dict[str, Any] = {
            "env": {"ENABLE_TOOL_SEARCH": "true"},
            "permissions": {
                "allow": allow,
                "additionalDirectories": additional_directories,
            },
        }
        return self.apply_overrides(config, settings)


def path_permissions(path: str) -> list[str]:
    """Read/Glob/Grep/Write/Edit rules covering everything below ``path``."""
    pattern = f"{_permission_root(path)}/**"
    return [f"{tool}({pattern})" for tool in PATH_SCOPED_TOOLS]


def _permission_root(path: str) -> str:
    # "~/x" is home-relative and "//x" absolute in Claude permission rules
    path = path.rstrip("/") or "/"
    if path.startswith("~/"):
        return path
    if path.startswith("/"):
        return "//" + path.lstrip("/")
    return path
