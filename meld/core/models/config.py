"""
Hub configuration model — the typed view of meld.jsonc.

Loaded by the config loader after schema validation. The generation
pipeline only ever reads these models; it never mutates them.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

AgentName = Literal["claude-code", "codex-cli", "gemini-cli"]

VALID_AGENTS: tuple[str, ...] = ("claude-code", "codex-cli", "gemini-cli")

AGENTS_DIR = "agents"

DEFAULT_AGENT_DIRS: dict[str, str] = {
    "claude-code": "claude-code",
    "codex-cli": "codex",
    "gemini-cli": "gemini",
}

DEFAULT_CONTEXT_PATH = "./context/"


class ProjectConfig(BaseModel):
    """A project registered in the hub."""

    path: str
    aliases: list[str] = Field(default_factory=list)
    repo: str | None = None


class AgentConfig(BaseModel):
    """Per-agent switch, output directory and settings overrides."""

    enabled: bool = False
    dir: str | None = None
    overrides: dict[str, Any] | None = None


class _McpServerBase(BaseModel):
    headers: dict[str, str] | None = None
    env: dict[str, str] | None = None
    agents: list[AgentName] | None = None

    def allows(self, agent: str) -> bool:
        """True if this server should be emitted for ``agent``."""
        return self.agents is None or agent in self.agents


class McpStdioServer(_McpServerBase):
    """An MCP server launched as a local process."""

    type: Literal["stdio"] = "stdio"
    command: str
    args: list[str]


class McpHttpServer(_McpServerBase):
    """An MCP server reached over HTTP."""

    type: Literal["http"]
    url: str


def _mcp_transport(value: Any) -> str:
    if isinstance(value, dict):
        return "http" if value.get("type") == "http" else "stdio"
    return "http" if getattr(value, "type", None) == "http" else "stdio"


McpServer = Annotated[
    Union[
        Annotated[McpStdioServer, Tag("stdio")],
        Annotated[McpHttpServer, Tag("http")],
    ],
    Discriminator(_mcp_transport),
]


class IdeConfig(BaseModel):
    """Editor integration settings."""

    model_config = ConfigDict(populate_by_name=True)

    default: str
    workspace_name: str = Field(alias="workspaceName")


class MeldConfig(BaseModel):
    """Root of meld.jsonc.

    If an agent, project or MCP server isn't declared here, no
    generated file will mention it.
    """

    projects: dict[str, ProjectConfig] = Field(default_factory=dict)
    agents: dict[AgentName, AgentConfig] = Field(default_factory=dict)
    mcp: dict[str, McpServer] = Field(default_factory=dict)
    context: str | None = None
    ide: IdeConfig

    def agent(self, name: str) -> AgentConfig:
        """Config for ``name``, or a disabled default when undeclared."""
        return self.agents.get(name) or AgentConfig()  # type: ignore[call-overload]

    def agent_dir(self, name: str) -> str:
        """Output directory for an agent, relative to ``agents/``."""
        return self.agent(name).dir or DEFAULT_AGENT_DIRS[name]

    def enabled_agents(self) -> list[str]:
        """Enabled agent names, in declaration order."""
        return [name for name, agent in self.agents.items() if agent.enabled]

    def context_path(self) -> str:
        return self.context or DEFAULT_CONTEXT_PATH
