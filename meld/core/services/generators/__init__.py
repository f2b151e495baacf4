"""
Generators — produce agent and hub files from config plus composed context.

Each generator class exposes ``generate(config, context)`` returning
a list of ``GeneratedFile`` instances. Agent generators are looked up
by agent name in ``AGENT_GENERATORS``; hub generators run once per
unfiltered pass.
"""

from meld.core.services.generators.base import AgentGenerator, Generator
from meld.core.services.generators.claude_code import ClaudeCodeGenerator
from meld.core.services.generators.codex_cli import CodexCliGenerator
from meld.core.services.generators.gemini_cli import GeminiCliGenerator
from meld.core.services.generators.gitignore import GitignoreGenerator
from meld.core.services.generators.workspace import WorkspaceGenerator
from meld.core.services.generators.writer import write_generated_files

AGENT_GENERATORS: dict[str, type[AgentGenerator]] = {
    "claude-code": ClaudeCodeGenerator,
    "codex-cli": CodexCliGenerator,
    "gemini-cli": GeminiCliGenerator,
}

HUB_GENERATORS: tuple[type[Generator], ...] = (WorkspaceGenerator, GitignoreGenerator)

__all__ = [
    "AGENT_GENERATORS",
    "AgentGenerator",
    "ClaudeCodeGenerator",
    "CodexCliGenerator",
    "GeminiCliGenerator",
    "Generator",
    "GitignoreGenerator",
    "HUB_GENERATORS",
    "WorkspaceGenerator",
    "write_generated_files",
]
