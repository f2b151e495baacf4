"""
.gitignore generator — keep meld's managed block in the hub's .gitignore.

Everything outside the sentinel lines belongs to the user and is
preserved byte for byte; the block between them is rewritten on
every pass.
"""

from __future__ import annotations

from pathlib import Path

from meld.core.models.config import MeldConfig
from meld.core.models.context import ComposedContext
from meld.core.models.template import GeneratedFile
from meld.core.services.generators.base import Generator

START_MARKER = "# ── meld managed (do not edit) ──"
END_MARKER = "# ── end meld managed ──"

MANAGED_PATTERNS = ("agents/", "scratch/")


class GitignoreGenerator(Generator):
    name = "gitignore"

    def generate(self, config: MeldConfig, context: ComposedContext) -> list[GeneratedFile]:
        block = "\n".join([START_MARKER, *MANAGED_PATTERNS, END_MARKER])
        path = Path(context.hub_dir) / ".gitignore"
        existing = path.read_text(encoding="utf-8") if path.is_file() else None
        return [GeneratedFile(path=".gitignore", content=splice_managed_block(existing, block))]


def splice_managed_block(existing: str | None, block: str) -> str:
    """Return .gitignore content with ``block`` as the managed region.

    Args:
        existing: Current file content, or None if there is no file.
        block: Managed block including both sentinel lines.
    """
    if existing is None:
        return block + "\n"

    start = existing.find(START_MARKER)
    end = existing.find(END_MARKER, start + len(START_MARKER)) if start != -1 else -1

    if start == -1 or end == -1:
        trimmed = existing.rstrip()
        return trimmed + ("\n\n" if trimmed else "") + block + "\n"

    return existing[:start] + block + existing[end + len(END_MARKER):]
