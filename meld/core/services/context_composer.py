"""
Context composer — turn the hub's shared directories into generator input.

Reads the context root, commands/ and skills/ and combines them with
the project registry into a ComposedContext. Missing directories are
normal (a fresh hub has none of them) and simply yield empty parts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

from meld.core.models.config import MeldConfig
from meld.core.models.context import CommandMeta, ComposedContext, ContextFile, SkillMeta

logger = logging.getLogger(__name__)

COMMANDS_DIR = "commands"
SKILLS_DIR = "skills"
SKILL_FILE = "SKILL.md"
MARKDOWN_SUFFIX = ".md"

_yaml_handler = YAMLHandler()

_ARTIFACTS_SECTION = """\
## Artifacts

Write durable outputs to the hub, not to project repositories:

- `artifacts/hub/` — plans, notes and reports that concern the hub itself
  or span several projects.
- `artifacts/projects/{project-name}/` — outputs about a single registered
  project, using the project name from the table above.
- `scratch/` — throwaway working files. Not version-controlled; anything
  here may be deleted at any time."""


def compose_context(hub_dir: Path, config: MeldConfig) -> ComposedContext:
    """Build the ComposedContext for one generation pass.

    Args:
        hub_dir: Hub root directory.
        config: Validated, interpolated hub config.

    Returns:
        ComposedContext shared by every generator in the pass.
    """
    context_root = hub_dir / config.context_path()

    return ComposedContext(
        hub_dir=str(hub_dir),
        hub_preamble=build_hub_preamble(config),
        project_table=build_project_table(config),
        artifacts_section=_ARTIFACTS_SECTION,
        context=read_root_context(context_root),
        context_files=collect_context_files(context_root),
        commands=read_commands(hub_dir / COMMANDS_DIR),
        skills=read_skills(hub_dir / SKILLS_DIR),
    )


# ── Synthesized sections ────────────────────────────────────────


def build_hub_preamble(config: MeldConfig) -> str:
    name = config.ide.workspace_name
    return "\n".join([
        f"# {name}",
        "",
        f"You are working in **{name}**, a meld hub: one place that holds the "
        "shared instructions, commands and skills for every coding agent and "
        "the projects registered below.",
        "",
        "## Hub Structure",
        "",
        "- `meld.jsonc` — hub configuration (projects, agents, MCP servers)",
        "- `context/` — shared instructions included in every agent's context",
        "- `commands/` — slash commands, one markdown file per command",
        "- `skills/` — skills, one folder per skill with a `SKILL.md`",
        "- `artifacts/` — durable outputs (see Artifacts below)",
        "- `scratch/` — temporary working files (machine-managed, git-ignored)",
        "- `agents/` — generated per-agent configuration "
        "(machine-managed, do not edit; regenerate with `meld gen`)",
    ])


def build_project_table(config: MeldConfig) -> str:
    """Markdown table of registered projects, or "" when there are none."""
    if not config.projects:
        return ""

    lines = [
        "## Projects",
        "",
        "| Project | Aliases | Path | Repo |",
        "|---------|---------|------|------|",
    ]
    for name, project in config.projects.items():
        aliases = ", ".join(project.aliases)
        lines.append(f"| {name} | {aliases} | {project.path} | {project.repo or ''} |")
    return "\n".join(lines)


# ── Filesystem readers ──────────────────────────────────────────


def read_root_context(context_root: Path) -> str:
    """Concatenate the markdown files directly inside the context root.

    Files are sorted by name and joined with a blank line. Files in
    subfolders are not included here (see collect_context_files).
    """
    if not context_root.is_dir():
        logger.debug("No context directory at %s", context_root)
        return ""

    files = sorted(
        (p for p in context_root.iterdir() if p.is_file() and p.name.endswith(MARKDOWN_SUFFIX)),
        key=lambda p: p.name,
    )
    return "\n\n".join(p.read_text(encoding="utf-8").strip() for p in files)


def collect_context_files(context_root: Path) -> list[ContextFile]:
    """Every file below a subfolder of the context root, any extension.

    Content is kept as raw bytes so images and other binary assets are
    copied unchanged.
    """
    if not context_root.is_dir():
        return []

    files: list[ContextFile] = []
    for sub in sorted(p for p in context_root.iterdir() if p.is_dir()):
        for path in sorted(p for p in sub.rglob("*") if p.is_file()):
            files.append(ContextFile(
                path=path.relative_to(context_root).as_posix(),
                content=path.read_bytes(),
            ))
    return files


def read_commands(commands_dir: Path) -> list[CommandMeta]:
    if not commands_dir.is_dir():
        return []

    return [
        CommandMeta(name=path.stem, content=path.read_text(encoding="utf-8"))
        for path in sorted(commands_dir.iterdir())
        if path.is_file() and path.name.endswith(MARKDOWN_SUFFIX)
    ]


def read_skills(skills_dir: Path) -> list[SkillMeta]:
    """One SkillMeta per skills/<name>/ folder that holds a valid SKILL.md."""
    if not skills_dir.is_dir():
        return []

    skills: list[SkillMeta] = []
    for folder in sorted(p for p in skills_dir.iterdir() if p.is_dir()):
        skill_file = folder / SKILL_FILE
        if not skill_file.is_file():
            logger.debug("Skipping skill folder without %s: %s", SKILL_FILE, folder)
            continue

        skill = parse_skill(folder.name, skill_file.read_text(encoding="utf-8"))
        if skill is None:
            logger.warning("Skipping %s: missing or invalid frontmatter", skill_file)
            continue
        skills.append(skill)
    return skills


def parse_skill(name: str, text: str) -> SkillMeta | None:
    """Split a SKILL.md into frontmatter and body.

    The file must open with a ``---`` line and close the block with a
    second one. Returns None when it doesn't, or when a frontmatter
    line is not ``key: value`` (see parse_frontmatter).
    """
    if not _yaml_handler.detect(text):
        return None

    try:
        fm, content = _yaml_handler.split(text)
    except ValueError:
        logger.debug("Skill %s has no closing frontmatter delimiter", name)
        return None

    metadata = parse_frontmatter(fm)
    if metadata is None:
        logger.debug("Skill %s frontmatter is not key/value lines", name)
        return None

    return SkillMeta(name=name, frontmatter=metadata, body=content.lstrip("\r\n"))


def parse_frontmatter(block: str) -> dict[str, Any] | None:
    """Parse simple ``key: value`` frontmatter lines.

    Keys split on the first colon, so values may contain colons.
    Scalars keep their source text (``1.10`` stays ``"1.10"``), except
    ``true``/``false`` which become booleans, ``[a, b]`` which becomes
    a list, and quoted strings which are unquoted.

    A key with no value takes its indented child lines: ``key: value``
    children form a map (used for per-agent ``model``), ``- item``
    children a list. An indented line under a key that has a value
    continues that value.

    Returns None if a top-level line is not a ``key: value`` pair.
    """
    result: dict[str, Any] = {}
    key: str | None = None

    for line in block.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if line[0] in " \t":
            if key is None:
                return None
            current = result[key]
            if stripped.startswith("- "):
                item = _frontmatter_value(stripped[2:].strip())
                if current == "":
                    result[key] = [item]
                elif isinstance(current, list):
                    current.append(item)
                else:
                    return None
            elif current == "" or isinstance(current, dict):
                child_key, sep, child_value = stripped.partition(":")
                if not sep:
                    return None
                if current == "":
                    current = result[key] = {}
                current[child_key.strip()] = _frontmatter_value(child_value.strip())
            elif isinstance(current, str):
                result[key] = f"{current} {stripped}"
            else:
                return None
            continue

        raw_key, sep, raw_value = line.partition(":")
        key = raw_key.strip()
        if not sep or not key:
            return None
        result[key] = _frontmatter_value(raw_value.strip())

    return result


def _frontmatter_value(raw: str) -> Any:
    if raw in ("true", "false"):
        return raw == "true"
    if len(raw) >= 2 and raw[0] == "[" and raw[-1] == "]":
        return [_unquote(item.strip()) for item in raw[1:-1].split(",") if item.strip()]
    return _unquote(raw)


def _unquote(raw: str) -> str:
    if len(raw) < 2 or raw[0] != raw[-1] or raw[0] not in "\"'":
        return raw
    # Quoted scalars follow YAML escaping rules
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw[1:-1]
    return value if isinstance(value, str) else raw[1:-1]
