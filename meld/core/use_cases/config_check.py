"""
Config check use case — validate meld.jsonc and report issues.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from meld.core.config.interpolate import interpolate_env
from meld.core.config.loader import ConfigError, config_path, load_config
from meld.core.models.config import MeldConfig
from meld.core.services.generators.workspace import resolve_tilde


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: MeldConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "workspace_name": self.config.ide.workspace_name if self.config else None,
            "project_count": len(self.config.projects) if self.config else 0,
            "enabled_agents": self.config.enabled_agents() if self.config else [],
            "mcp_server_count": len(self.config.mcp) if self.config else 0,
        }


def check_config(
    hub_dir: Path,
    environ: Mapping[str, str] | None = None,
) -> ConfigCheckResult:
    """Validate hub configuration and report issues.

    Args:
        hub_dir: Hub root holding meld.jsonc.
        environ: Variables for interpolation (default: process env).

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult(config_path=config_path(hub_dir))

    # Load and validate
    try:
        config = load_config(hub_dir)
    except ConfigError as e:
        result.errors.extend(e.errors)
        return result

    interpolated = interpolate_env(config, environ)
    config = interpolated.config
    result.config = config
    result.warnings.extend(interpolated.warnings)

    # Semantic checks
    enabled = config.enabled_agents()
    if not enabled:
        result.warnings.append("No agents enabled. 'meld gen' will only write hub files.")

    for name, project in config.projects.items():
        if not Path(resolve_tilde(project.path)).exists():
            result.warnings.append(f"Project '{name}' path does not exist: {project.path}")

    for name, server in config.mcp.items():
        if server.agents is not None and not set(server.agents) & set(enabled):
            result.warnings.append(
                f"MCP server '{name}' is scoped to agents that are not enabled: "
                f"{', '.join(server.agents) or '(none)'}"
            )

    # Result
    result.valid = len(result.errors) == 0
    return result
