"""
VS Code-style workspace generator — <workspaceName>.code-workspace at the hub root.
"""

from __future__ import annotations

from pathlib import Path

from meld.core.models.config import MeldConfig
from meld.core.models.context import ComposedContext
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.base import Generator
from meld.core.services.generators.utils import dump_json


class WorkspaceGenerator(Generator):
    name = "workspace"

    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        folders = [{"name": config.ide.workspace_name, "path": "."}]
        folders.extend(
            {"name": name, "path": resolve_tilde(project.path)}
            for name, project in config.projects.items()
        )

        return [GeneratedFile(
            path=f"{config.ide.workspace_name}.code-workspace",
            content=dump_json({"folders": folders, "settings": {}}),
        )]


def resolve_tilde(path: str) -> str:
    """Expand a leading ``~/`` to the current user's home directory."""
    if path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path
