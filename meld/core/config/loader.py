"""
Configuration loader — reads meld.jsonc into the hub config model.

This is the primary entry point for loading hub configuration.
It reads JSON-with-comments, runs schema validation, and returns
a typed MeldConfig.
"""

from __future__ import annotations

import logging
from pathlib import Path

from meld.core.config import jsonc
from meld.core.config.schema import validate_config
from meld.core.models.config import MeldConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "meld.jsonc"


class ConfigError(Exception):
    """Raised when hub configuration is invalid or missing."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors if errors is not None else [message]


class ConfigNotFoundError(ConfigError):
    """meld.jsonc does not exist in the hub directory."""


class ConfigParseError(ConfigError):
    """meld.jsonc could not be read or is not valid JSON-with-comments."""


class ConfigValidationError(ConfigError):
    """meld.jsonc parsed but violates the schema."""

    def __init__(self, errors: list[str]):
        super().__init__(f"Invalid configuration: {len(errors)} error(s)", errors)


def config_path(hub_dir: Path) -> Path:
    return hub_dir / CONFIG_FILE


def find_hub_dir(start_dir: Path | None = None) -> Path | None:
    """Search for meld.jsonc starting from the given directory, walking up.

    This allows running commands from inside a hub's subdirectories.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        The hub directory, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        if (current / CONFIG_FILE).is_file():
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(hub_dir: Path) -> MeldConfig:
    """Load and validate hub configuration.

    Args:
        hub_dir: Hub root holding meld.jsonc.

    Returns:
        Validated MeldConfig (environment variables not yet interpolated).

    Raises:
        ConfigNotFoundError: If meld.jsonc is missing.
        ConfigParseError: If it cannot be read or parsed.
        ConfigValidationError: If it fails schema validation.
    """
    path = config_path(hub_dir)

    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    logger.debug("Loading hub config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(f"Failed to read config: {e}") from e

    try:
        data = jsonc.loads(raw)
    except jsonc.JsoncDecodeError as e:
        raise ConfigParseError(f"Invalid JSONC in {CONFIG_FILE}: {e}") from e

    result = validate_config(data)
    if not result.ok:
        raise ConfigValidationError(result.errors)

    assert result.config is not None
    logger.info(
        "Loaded hub '%s' with %d project(s), %d MCP server(s)",
        result.config.ide.workspace_name,
        len(result.config.projects),
        len(result.config.mcp),
    )
    return result.config
