"""
Environment-variable interpolation — ``${NAME}`` substitution in config values.

Runs after validation. Only values are rewritten, never object keys.
Unset variables keep their placeholder and produce a warning; this
step never fails.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from meld.core.models.config import MeldConfig

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class InterpolateResult:
    config: MeldConfig
    warnings: list[str] = field(default_factory=list)


def interpolate_value(value: Any, environ: Mapping[str, str], warnings: list[str]) -> Any:
    """Return ``value`` with every resolvable ``${NAME}`` substituted.

    Walks dicts and lists recursively; numbers, booleans and None are
    returned as-is. One warning is appended per unresolved occurrence.
    """
    if isinstance(value, str):
        def _replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in environ:
                warnings.append(f"Environment variable not set: {name}")
                return match.group(0)
            return environ[name]

        return ENV_PATTERN.sub(_replace, value)

    if isinstance(value, list):
        return [interpolate_value(item, environ, warnings) for item in value]

    if isinstance(value, dict):
        return {key: interpolate_value(val, environ, warnings) for key, val in value.items()}

    return value


def interpolate_env(
    config: MeldConfig,
    environ: Mapping[str, str] | None = None,
) -> InterpolateResult:
    """Interpolate environment variables throughout a validated config.

    Args:
        config: Validated configuration (left untouched).
        environ: Variable lookup. Defaults to the process environment.

    Returns:
        InterpolateResult with a new config and any warnings.
    """
    if environ is None:
        environ = os.environ

    warnings: list[str] = []
    raw = config.model_dump(by_alias=True, exclude_unset=True)
    resolved = interpolate_value(raw, environ, warnings)

    for warning in warnings:
        logger.debug(warning)

    return InterpolateResult(config=MeldConfig.model_validate(resolved), warnings=warnings)
