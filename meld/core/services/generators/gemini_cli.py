"""
Gemini CLI generator — GEMINI.md, .gemini/settings.json and TOML commands.

Gemini custom commands are TOML files; both hub commands and skills
are rendered into .gemini/commands/meld/. A skill sharing a name with
a command overwrites it (skills are emitted last).
"""

from __future__ import annotations

from typing import Any

import tomli_w

from meld.core.models.config import MeldConfig
from meld.core.models.context import ComposedContext, SkillMeta
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.base import AgentGenerator
from meld.core.services.generators.utils import dump_json


class GeminiCliGenerator(AgentGenerator):
    name = "gemini-cli"

    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        files = [
            GeneratedFile(path="GEMINI.md", content=self.build_instructions(context)),
            GeneratedFile(
                path=".gemini/settings.json",
                content=dump_json(self.build_settings(config)),
            ),
        ]

        for command in context.commands:
            files.append(GeneratedFile(
                path=f".gemini/commands/meld/{command.name}.toml",
                content=command_toml(command.name, command.content),
            ))

        for skill in context.skills:
            files.append(GeneratedFile(
                path=f".gemini/commands/meld/{skill.name}.toml",
                content=skill_toml(skill),
            ))

        files.extend(self.context_files(context))
        return files

    def build_settings(self, config: MeldConfig) -> dict[str, Any]:
        return self.apply_overrides(config, {"mcpServers": self.mcp_json_servers(config)})


def command_toml(description: str, prompt: str) -> str:
    return "\n".join([
        tomli_w.dumps({"description": description}).rstrip("\n"),
        "",
        "[template]",
        'prompt = """',
        escape_multiline(prompt),
        '"""',
    ]) + "\n"


def escape_multiline(text: str) -> str:
    """Make ``text`` safe inside a TOML multi-line basic string.

    Plain text passes through untouched; only backslashes and runs of
    three quotes need escaping.
    """
    return text.replace("\\", "\\\\").replace('"""', '""\\"')


def skill_toml(skill: SkillMeta) -> str:
    description = skill.frontmatter.get("description")
    if not isinstance(description, str) or not description:
        description = skill.name
    return f"# skill: {skill.name}\n" + command_toml(description, skill.body)
