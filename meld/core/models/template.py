"""
Generated file model — used by all generators.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced by a generator.

    Attributes:
        path:    Relative path from the hub root (agent generators
                 return paths relative to their own subtree; the
                 orchestrator prefixes them).
        content: Full file content; bytes for files copied verbatim
                 (binary context assets).
    """

    path: str
    content: str | bytes

    def with_prefix(self, prefix: str) -> GeneratedFile:
        """Copy of this file relocated under ``prefix``."""
        return self.model_copy(update={"path": f"{prefix.rstrip('/')}/{self.path}"})
