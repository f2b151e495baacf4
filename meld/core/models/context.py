"""
Composed context — everything the agent generators read from the hub.

Rebuilt on every generation pass from the context/, commands/ and
skills/ directories plus the project registry. Never persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ContextFile(BaseModel):
    """A file found in a context subfolder, copied verbatim per agent."""

    path: str       # relative to the context root
    content: bytes


class CommandMeta(BaseModel):
    """A slash command read from commands/<name>.md."""

    name: str
    content: str


class SkillMeta(BaseModel):
    """A skill read from skills/<name>/SKILL.md.

    ``frontmatter["model"]`` may be a plain model id or a map of
    agent name → model id; generators resolve it per agent.
    """

    name: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""


class ComposedContext(BaseModel):
    """Structured hub content shared by every generator in a pass."""

    hub_dir: str
    hub_preamble: str
    project_table: str = ""
    artifacts_section: str
    context: str = ""
    context_files: list[ContextFile] = Field(default_factory=list)
    commands: list[CommandMeta] = Field(default_factory=list)
    skills: list[SkillMeta] = Field(default_factory=list)
