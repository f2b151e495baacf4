"""
Schema validation for meld.jsonc.

Checks the raw parsed value before any model is built. Missing
top-level keys fail fast; past that point every violation is
collected so the user sees the whole list in one run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from meld.core.models.config import VALID_AGENTS, MeldConfig

REQUIRED_KEYS = ("projects", "agents", "mcp", "ide")


@dataclass
class ValidationResult:
    """Outcome of validate_config(): a config, or the errors that prevent one."""

    config: MeldConfig | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.config is not None and not self.errors


def validate_config(raw: Any) -> ValidationResult:
    """Validate a parsed meld.jsonc value.

    Args:
        raw: Whatever the JSONC reader produced.

    Returns:
        ValidationResult holding a MeldConfig, or every error found.
    """
    if not isinstance(raw, dict):
        return ValidationResult(errors=["Config must be an object"])

    missing = [f"Missing required key: {key}" for key in REQUIRED_KEYS if key not in raw]
    if missing:
        return ValidationResult(errors=missing)

    errors: list[str] = []
    errors.extend(_check_agents(raw["agents"]))
    errors.extend(_check_mcp(raw["mcp"]))

    context = raw.get("context")
    if context is not None and not isinstance(context, str):
        errors.append("context must be a string path")

    if errors:
        return ValidationResult(errors=errors)

    try:
        config = MeldConfig.model_validate(raw)
    except ValidationError as e:
        return ValidationResult(errors=_format_pydantic_errors(e))

    return ValidationResult(config=config)


def _check_agents(agents: Any) -> list[str]:
    if not isinstance(agents, dict):
        return ["agents must be an object"]

    errors: list[str] = []
    for name, agent in agents.items():
        if name not in VALID_AGENTS:
            errors.append(
                f"Invalid agent name: {name}. Must be one of: {', '.join(VALID_AGENTS)}"
            )

        if not isinstance(agent, dict):
            errors.append(f'Agent "{name}" must be an object')
            continue

        overrides = agent.get("overrides")
        if overrides is not None and not isinstance(overrides, dict):
            errors.append(f'Agent "{name}" overrides must be an object')

    return errors


def _check_mcp(mcp: Any) -> list[str]:
    if not isinstance(mcp, dict):
        return ["mcp must be an object"]

    errors: list[str] = []
    for name, server in mcp.items():
        if not isinstance(server, dict):
            errors.append(f'MCP server "{name}" must be an object')
            continue

        if server.get("type") == "http":
            if not _non_empty_str(server.get("url")):
                errors.append(f'MCP server "{name}" (http) must have a "url" string')
        else:
            if not _non_empty_str(server.get("command")):
                errors.append(f'MCP server "{name}" (stdio) must have a "command" string')
            if not isinstance(server.get("args"), list):
                errors.append(f'MCP server "{name}" (stdio) must have an "args" array')

        scope = server.get("agents")
        if isinstance(scope, list):
            for agent in scope:
                if agent not in VALID_AGENTS:
                    errors.append(f'MCP server "{name}" has invalid agent scope: {agent}')
        elif scope is not None:
            errors.append(f'MCP server "{name}" agents must be an array')

    return errors


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _format_pydantic_errors(exc: ValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        parts = list(err["loc"])
        # mcp.<server>.<union tag>.<field>; the tag is dropped
        if len(parts) > 2 and parts[0] == "mcp" and parts[2] in ("stdio", "http"):
            del parts[2]
        loc = ".".join(str(part) for part in parts)
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages
