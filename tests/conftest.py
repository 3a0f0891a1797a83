"""Pytest configuration and fixtures for claude-config-kit tests."""

import json
import os
import shutil
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from claude_config_kit.config.settings import StoreSettings
from claude_config_kit.services.config_store import ConfigStore


@pytest.fixture
def temp_project_dir() -> Iterator[Path]:
    """Create a temporary project directory and make it the working directory.

    Yields:
        Path to temporary directory
    """
    temp_dir = Path(tempfile.mkdtemp(prefix="claude-config-kit-test-")).resolve()
    original_cwd = Path.cwd()
    try:
        os.chdir(temp_dir)
        yield temp_dir
    finally:
        os.chdir(original_cwd)
        shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a fake home directory and point the runtime settings at it.

    Returns:
        Path to the fake home directory
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("CCK_HOME_DIR", str(home))
    monkeypatch.setenv("CCK_CREATE_BACKUPS", "false")
    return home


@pytest.fixture
def store(home_dir: Path) -> ConfigStore:
    """Config store rooted in the fake home directory, without backups."""
    return ConfigStore(StoreSettings(home_dir=home_dir, create_backups=False))


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Return a helper writing JSON to a path (creating parent directories)."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def read_json() -> Callable[[Path], Any]:
    """Return a helper reading JSON from a path."""

    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def sample_settings() -> dict[str, Any]:
    """A settings document using every modeled field.

    Returns:
        Dictionary in settings.json shape
    """
    return {
        "permissions": {"allow": ["Bash(npm run *)", "Read(src/**)"], "deny": ["Read(.env)"]},
        "env": {"NODE_ENV": "development"},
        "hooks": {
            "PreToolUse": [
                {"matcher": "Bash", "hooks": [{"type": "command", "command": "npm run lint"}]}
            ]
        },
        "disallowedTools": ["WebFetch"],
        "attribution": {"commits": True, "pullRequests": False},
    }


@pytest.fixture
def sample_mcp_servers() -> dict[str, Any]:
    """Two MCP servers, one stdio with a token and one HTTP.

    Returns:
        Dictionary in .mcp.json shape
    """
    return {
        "mcpServers": {
            "github": {
                "command": "npx",
                "args": ["-y", "@modelcontextprotocol/server-github"],
                "env": {"GITHUB_TOKEN": "ghp_secret", "LOG_LEVEL": "info"},
            },
            "docs": {
                "type": "http",
                "url": "https://mcp.example.com/docs",
                "headers": {"Authorization": "Bearer abc"},
            },
        }
    }
