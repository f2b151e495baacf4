"""
Domain models — Pydantic types for meld.

All models are re-exported here for convenient access:

    from meld.core.models import MeldConfig, ComposedContext, GeneratedFile
"""

from meld.core.models.config import (
    AGENTS_DIR,
    DEFAULT_AGENT_DIRS,
    DEFAULT_CONTEXT_PATH,
    VALID_AGENTS,
    AgentConfig,
    AgentName,
    IdeConfig,
    McpHttpServer,
    McpServer,
    McpStdioServer,
    MeldConfig,
    ProjectConfig,
)
from meld.core.models.context import (
    CommandMeta,
    ComposedContext,
    ContextFile,
    SkillMeta,
)
from meld.core.models.template import GeneratedFile

__all__ = [
    # config.py
    "AGENTS_DIR",
    "AgentConfig",
    "AgentName",
    # context.py
    "CommandMeta",
    "ComposedContext",
    "ContextFile",
    "DEFAULT_AGENT_DIRS",
    "DEFAULT_CONTEXT_PATH",
    # template.py
    "GeneratedFile",
    "IdeConfig",
    "McpHttpServer",
    "McpServer",
    "McpStdioServer",
    "MeldConfig",
    "ProjectConfig",
    "SkillMeta",
    "VALID_AGENTS",
]
