"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def hub_dir(tmp_path: Path) -> Path:
    """Return an empty hub directory."""
    hub = tmp_path / "hub"
    hub.mkdir()
    return hub


@pytest.fixture
def write_config(hub_dir: Path):
    """Write meld.jsonc into the hub; accepts a dict or raw text."""

    def _write(data: dict[str, Any] | str) -> Path:
        path = hub_dir / "meld.jsonc"
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
