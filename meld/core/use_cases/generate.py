"""
Generate use case — the full pass from meld.jsonc to files on disk.

validate → interpolate → compose → generate per agent → hub files →
write. Nothing is written unless every earlier step succeeded, so a
bad config or an unserializable override leaves the hub untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from meld.core.config.interpolate import interpolate_env
from meld.core.config.loader import ConfigError, load_config
from meld.core.models.config import AGENTS_DIR, VALID_AGENTS, MeldConfig
from meld.core.models.template import GeneratedFile
from meld.core.services.context_composer import compose_context
from meld.core.services.generators import (
    AGENT_GENERATORS,
    HUB_GENERATORS,
    write_generated_files,
)

logger = logging.getLogger(__name__)

ARTIFACTS_PROJECTS_DIR = Path("artifacts") / "projects"


@dataclass
class GenerateResult:
    """Result of a generation pass."""

    ok: bool = False
    files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    hub_name: str = ""
    dry_run: bool = False

    def to_dict(self) -> dict:
        if not self.ok:
            return {"ok": False, "errors": self.errors}
        return {
            "ok": True,
            "hub_name": self.hub_name,
            "dry_run": self.dry_run,
            "files": [f.path for f in self.files],
            "warnings": self.warnings,
        }


def generate(
    hub_dir: Path,
    dry_run: bool = False,
    agent: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> GenerateResult:
    """Generate every agent bundle and hub file for ``hub_dir``.

    Args:
        hub_dir: Hub root holding meld.jsonc.
        dry_run: Build the file list without touching the filesystem.
        agent: Only generate this agent; hub-root files are skipped.
        environ: Variables for ``${NAME}`` interpolation (default: process env).

    Returns:
        GenerateResult — ok with files and warnings, or the errors.
    """
    if agent is not None and agent not in VALID_AGENTS:
        return GenerateResult(
            errors=[f"Unknown agent: {agent}. Must be one of: {', '.join(VALID_AGENTS)}"]
        )

    try:
        config = load_config(hub_dir)
    except ConfigError as e:
        logger.debug("Config load failed: %s", e)
        return GenerateResult(errors=e.errors)

    interpolated = interpolate_env(config, environ)
    config = interpolated.config

    try:
        files = build_files(hub_dir, config, agent)
    except (TypeError, ValueError) as e:
        logger.error("Generation failed: %s", e)
        return GenerateResult(errors=[str(e)], warnings=interpolated.warnings)

    if not dry_run:
        for name in config.projects:
            (hub_dir / ARTIFACTS_PROJECTS_DIR / name).mkdir(parents=True, exist_ok=True)

    write_generated_files(hub_dir, files, dry_run=dry_run)

    return GenerateResult(
        ok=True,
        files=files,
        warnings=interpolated.warnings,
        hub_name=config.ide.workspace_name,
        dry_run=dry_run,
    )


def build_files(hub_dir: Path, config: MeldConfig, agent: str | None = None) -> list[GeneratedFile]:
    """Run every applicable generator and return hub-relative files.

    Raises:
        TomlSerializationError: If overrides hold values TOML can't express.
    """
    context = compose_context(hub_dir, config)
    files: list[GeneratedFile] = []

    for name in config.enabled_agents():
        if agent is not None and name != agent:
            logger.debug("Skipping %s (filtered to %s)", name, agent)
            continue

        prefix = f"{AGENTS_DIR}/{config.agent_dir(name)}"
        generated = AGENT_GENERATORS[name]().generate(config, context)
        files.extend(f.with_prefix(prefix) for f in generated)
        logger.info("Generated %d file(s) for %s", len(generated), name)

    if agent is not None and agent not in config.enabled_agents():
        logger.warning("Agent %s is not enabled in meld.jsonc; nothing generated for it", agent)

    if agent is None:
        for generator_cls in HUB_GENERATORS:
            files.extend(generator_cls().generate(config, context))

    return files
