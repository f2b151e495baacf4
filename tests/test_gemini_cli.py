"""
Tests for the Gemini CLI generator.
"""

import json
import tomllib

from meld.core.models.context import CommandMeta, ContextFile, SkillMeta
from meld.core.services.generators.gemini_cli import (
    GeminiCliGenerator,
    command_toml,
    skill_toml,
)

from tests.builders import make_config, make_context


def _files(config, context) -> dict[str, str]:
    return {f.path: f.content for f in GeminiCliGenerator().generate(config, context)}


class TestFileSet:
    def test_minimal_bundle(self):
        assert set(_files(make_config(), make_context())) == {"GEMINI.md", ".gemini/settings.json"}

    def test_commands_and_skills(self):
        context = make_context(
            commands=[CommandMeta(name="review", content="Review the diff.")],
            skills=[SkillMeta(name="deploy", frontmatter={"description": "Ship it"}, body="Steps")],
            context_files=[ContextFile(path="guides/style.md", content="Style\n")],
        )
        files = _files(make_config(), context)

        assert ".gemini/commands/meld/review.toml" in files
        assert ".gemini/commands/meld/deploy.toml" in files
        assert files["guides/style.md"] == b"Style\n"

    def test_skill_overwrites_same_named_command(self):
        context = make_context(
            commands=[CommandMeta(name="review", content="command text")],
            skills=[SkillMeta(name="review", frontmatter={}, body="skill text")],
        )
        generated = GeminiCliGenerator().generate(make_config(), context)

        paths = [f.path for f in generated]
        assert paths.count(".gemini/commands/meld/review.toml") == 2
        last = [f for f in generated if f.path == ".gemini/commands/meld/review.toml"][-1]
        assert "skill text" in last.content


class TestSettings:
    def test_mcp_servers(self):
        config = make_config(mcp={
            "docs": {"type": "http", "url": "https://x"},
            "fs": {"command": "fs", "args": ["--ro"]},
            "codex-only": {"command": "c", "args": [], "agents": ["codex-cli"]},
        })
        data = json.loads(_files(config, make_context())[".gemini/settings.json"])
        assert data == {"mcpServers": {
            "docs": {"type": "http", "url": "https://x"},
            "fs": {"command": "fs", "args": ["--ro"]},
        }}

    def test_overrides_merged(self):
        config = make_config(agents={
            "gemini-cli": {"enabled": True, "overrides": {"theme": "Dracula"}},
        })
        data = json.loads(_files(config, make_context())[".gemini/settings.json"])
        assert data == {"mcpServers": {}, "theme": "Dracula"}


class TestCommandToml:
    def test_layout(self):
        assert command_toml("review", "Do it") == (
            'description = "review"\n'
            "\n"
            "[template]\n"
            'prompt = """\n'
            "Do it\n"
            '"""\n'
        )

    def test_parses(self):
        doc = tomllib.loads(command_toml('say "hi"', "Line one\nLine two"))
        assert doc["description"] == 'say "hi"'
        assert doc["template"]["prompt"] == "Line one\nLine two\n"

    def test_skill_description_from_frontmatter(self):
        skill = SkillMeta(name="deploy", frontmatter={"description": "Ship it"}, body="Steps")
        text = skill_toml(skill)

        assert text.startswith("# skill: deploy\n")
        assert tomllib.loads(text)["description"] == "Ship it"

    def test_skill_description_falls_back_to_name(self):
        skill = SkillMeta(name="deploy", frontmatter={}, body="Steps")
        assert tomllib.loads(skill_toml(skill))["description"] == "deploy"

    def test_prompt_with_triple_quotes_and_backslashes(self):
        body = 'Print """docs""" and match C:\\path\\n with \\d+ """"'
        doc = tomllib.loads(command_toml("tricky", body))
        assert doc["template"]["prompt"] == body + "\n"

    def test_description_with_newline(self):
        doc = tomllib.loads(command_toml("line one\nline two", "x"))
        assert doc["description"] == "line one\nline two"
