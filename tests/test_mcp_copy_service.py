"""Tests for copying single MCP servers."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from claude_config_kit.exceptions import DuplicateNameError, InvalidNameError
from claude_config_kit.models import (
    ConflictStrategy,
    CopyDestination,
    CopyResolution,
    HttpServer,
    StdioServer,
)
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.mcp_copy_service import MCPServerCopyService

GITHUB = StdioServer(command="npx", env={"GITHUB_TOKEN": "ghp_x", "DEBUG": "1"})


@pytest.fixture
def service(store: ConfigStore) -> MCPServerCopyService:
    return MCPServerCopyService(store)


@pytest.fixture
def destination(
    temp_project_dir: Path, write_json: Callable[[Path, Any], Path]
) -> CopyDestination:
    write_json(
        temp_project_dir / ".mcp.json",
        {"mcpServers": {"github": {"command": "gh"}, "jira": {"command": "jira-mcp"}}},
    )
    return CopyDestination.project(temp_project_dir)


def _servers(path: Path, read_json: Callable[[Path], Any]) -> dict[str, Any]:
    return read_json(path / ".mcp.json")["mcpServers"]


def test_find_server(service: MCPServerCopyService, destination: CopyDestination) -> None:
    """Test looking up servers by name."""
    assert service.find_server("jira", destination) == StdioServer(command="jira-mcp")
    assert service.find_server("missing", destination) is None


def test_check_conflict(service: MCPServerCopyService, destination: CopyDestination) -> None:
    """Test a conflict is reported only for an existing name."""
    conflict = service.check_conflict("github", GITHUB, destination)

    assert conflict is not None
    assert conflict.existing_server == StdioServer(command="gh")
    assert conflict.new_server is GITHUB
    assert service.check_conflict("new", GITHUB, destination) is None


def test_detect_sensitive_env_vars(service: MCPServerCopyService) -> None:
    """Test only credential-like env vars and headers are flagged."""
    warnings = service.detect_sensitive_env_vars(GITHUB)
    assert [w.key for w in warnings] == ["GITHUB_TOKEN"]

    http = HttpServer(url="https://x.test", headers={"X-Api-Key": "k", "Accept": "json"})
    assert [w.key for w in service.detect_sensitive_env_vars(http)] == ["X-Api-Key"]


def test_copy_without_conflict(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test a new name is copied as-is."""
    result = service.copy_server("github-work", GITHUB, destination)

    assert result.success
    assert result.message == "Successfully copied 'github-work'"
    assert not result.renamed
    assert _servers(temp_project_dir, read_json)["github-work"]["command"] == "npx"


def test_copy_prompt_strategy_reports_conflict(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test the prompt strategy stops at a conflict without writing."""
    result = service.copy_server("github", GITHUB, destination)

    assert not result.success
    assert result.message == "Conflict detected - server 'github' already exists"
    assert _servers(temp_project_dir, read_json)["github"] == {"command": "gh"}


def test_copy_skip_strategy(service: MCPServerCopyService, destination: CopyDestination) -> None:
    """Test the skip strategy leaves the existing server."""
    result = service.copy_server("github", GITHUB, destination, ConflictStrategy.SKIP)

    assert not result.success
    assert result.message == "Skipped - server already exists"


def test_copy_overwrite_strategy(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test the overwrite strategy replaces the definition and keeps others."""
    result = service.copy_server("github", GITHUB, destination, ConflictStrategy.OVERWRITE)

    assert result.success
    servers = _servers(temp_project_dir, read_json)
    assert servers["github"]["command"] == "npx"
    assert servers["jira"] == {"command": "jira-mcp"}


def test_copy_rename_strategy(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test the rename strategy picks a free suffixed name."""
    result = service.copy_server("github", GITHUB, destination, ConflictStrategy.RENAME)

    assert result.success
    assert result.renamed
    assert result.server_name == "github"
    assert result.new_name == "github-copy"
    assert result.message == "Copied 'github' as 'github-copy'"
    assert set(_servers(temp_project_dir, read_json)) == {"github", "github-copy", "jira"}


def test_resolution_rename_to_chosen_name(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test renaming to a user-chosen name, trimmed of whitespace."""
    result = service.copy_server_with_resolution(
        "github", GITHUB, destination, CopyResolution.rename("  github-personal ")
    )

    assert result.success
    assert result.new_name == "github-personal"
    assert "github-personal" in _servers(temp_project_dir, read_json)


def test_resolution_rename_to_existing_name_fails(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
) -> None:
    """Test renaming onto another existing server is refused before writing."""
    before = (temp_project_dir / ".mcp.json").read_bytes()

    with pytest.raises(DuplicateNameError) as exc_info:
        service.copy_server_with_resolution(
            "github", GITHUB, destination, CopyResolution.rename("jira")
        )

    assert exc_info.value.name == "jira"
    assert (temp_project_dir / ".mcp.json").read_bytes() == before


@pytest.mark.parametrize("new_name", ["", "   "])
def test_resolution_rename_blank_fails(
    service: MCPServerCopyService, destination: CopyDestination, new_name: str
) -> None:
    """Test blank rename targets are refused."""
    with pytest.raises(InvalidNameError):
        service.copy_server_with_resolution(
            "github", GITHUB, destination, CopyResolution.rename(new_name)
        )


def test_resolution_skip_and_overwrite(
    service: MCPServerCopyService,
    destination: CopyDestination,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test explicit skip and overwrite resolutions."""
    skipped = service.copy_server_with_resolution(
        "github", GITHUB, destination, CopyResolution.skip()
    )
    assert not skipped.success
    assert skipped.message == "Skipped by user"
    assert _servers(temp_project_dir, read_json)["github"] == {"command": "gh"}

    overwritten = service.copy_server_with_resolution(
        "github", GITHUB, destination, CopyResolution.overwrite()
    )
    assert overwritten.success
    assert _servers(temp_project_dir, read_json)["github"]["command"] == "npx"


def test_copy_to_global(
    service: MCPServerCopyService,
    home_dir: Path,
    write_json: Callable[[Path, Any], Path],
    read_json: Callable[[Path], Any],
) -> None:
    """Test copying into ~/.claude.json preserves every other key."""
    write_json(home_dir / ".claude.json", {"projects": {"/tmp/x": {"history": []}}})

    result = service.copy_server("github", GITHUB, CopyDestination.global_config())

    assert result.success
    assert result.destination.is_global
    assert result.destination.display_name == "Global Configuration"
    saved = read_json(home_dir / ".claude.json")
    assert saved["projects"] == {"/tmp/x": {"history": []}}
    assert saved["mcpServers"]["github"]["env"]["GITHUB_TOKEN"] == "ghp_x"
