"""Tests for moving permission rules between scopes."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from claude_config_kit.exceptions import ConfigKitError, ProjectPathRequiredError
from claude_config_kit.models import PermissionType, Scope
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.permission_copy_service import PermissionCopyService

ALLOW = PermissionType.ALLOW
DENY = PermissionType.DENY


@pytest.fixture
def service(store: ConfigStore) -> PermissionCopyService:
    return PermissionCopyService(store)


def test_copy_rule_creates_file(
    service: PermissionCopyService, home_dir: Path, read_json: Callable[[Path], Any]
) -> None:
    """Test copying into a scope without a settings file creates it."""
    assert service.copy_rule("Bash(git status)", ALLOW, Scope.GLOBAL)

    saved = read_json(home_dir / ".claude" / "settings.json")
    assert saved == {"permissions": {"allow": ["Bash(git status)"]}}


def test_copy_rule_duplicate(
    service: PermissionCopyService,
    temp_project_dir: Path,
    write_json: Callable[[Path, Any], Path],
) -> None:
    """Test copying a rule that is already there changes nothing."""
    path = write_json(
        temp_project_dir / ".claude" / "settings.json",
        {"permissions": {"deny": ["Read(.env)"]}, "model": "opus"},
    )
    before = path.read_bytes()

    assert service.is_duplicate("Read(.env)", DENY, Scope.PROJECT_SHARED, temp_project_dir)
    assert not service.copy_rule("Read(.env)", DENY, Scope.PROJECT_SHARED, temp_project_dir)
    assert path.read_bytes() == before


def test_copy_rule_keeps_other_content(
    service: PermissionCopyService,
    temp_project_dir: Path,
    write_json: Callable[[Path, Any], Path],
    read_json: Callable[[Path], Any],
) -> None:
    """Test the rule is appended and unrelated keys are kept."""
    path = write_json(
        temp_project_dir / ".claude" / "settings.local.json",
        {"permissions": {"allow": ["A"]}, "env": {"X": "1"}, "model": "opus"},
    )

    service.copy_rule("B", ALLOW, Scope.PROJECT_LOCAL, temp_project_dir)

    assert read_json(path) == {
        "permissions": {"allow": ["A", "B"]},
        "env": {"X": "1"},
        "model": "opus",
    }


def test_copy_rule_project_scope_requires_path(service: PermissionCopyService) -> None:
    """Test project scopes need a project path."""
    with pytest.raises(ProjectPathRequiredError):
        service.copy_rule("A", ALLOW, Scope.PROJECT_SHARED)


def test_remove_rule_drops_empty_block(
    service: PermissionCopyService,
    temp_project_dir: Path,
    write_json: Callable[[Path, Any], Path],
    read_json: Callable[[Path], Any],
) -> None:
    """Test removing the last rule also drops the empty permissions block."""
    path = write_json(
        temp_project_dir / ".claude" / "settings.json",
        {"permissions": {"allow": ["A"]}, "env": {"X": "1"}},
    )

    service.remove_rule("A", ALLOW, Scope.PROJECT_SHARED, temp_project_dir)

    assert read_json(path) == {"env": {"X": "1"}}


def test_remove_rule_missing_file_creates_nothing(
    service: PermissionCopyService, temp_project_dir: Path
) -> None:
    """Test removing from a scope without a settings file leaves it absent."""
    service.remove_rule("A", ALLOW, Scope.PROJECT_LOCAL, temp_project_dir)

    assert not (temp_project_dir / ".claude" / "settings.local.json").exists()


def test_promote_rule_from_missing_local_scope(
    service: PermissionCopyService,
    home_dir: Path,
    temp_project_dir: Path,
    read_json: Callable[[Path], Any],
) -> None:
    """Test promoting from a scope without a file does not create one."""
    assert service.promote_rule("Bash(ls)", ALLOW, Scope.PROJECT_LOCAL, temp_project_dir)

    assert read_json(home_dir / ".claude" / "settings.json") == {
        "permissions": {"allow": ["Bash(ls)"]}
    }
    assert not (temp_project_dir / ".claude" / "settings.local.json").exists()


def test_promote_rule(
    service: PermissionCopyService,
    home_dir: Path,
    temp_project_dir: Path,
    write_json: Callable[[Path, Any], Path],
    read_json: Callable[[Path], Any],
) -> None:
    """Test promoting moves a local rule to Global."""
    write_json(home_dir / ".claude" / "settings.json", {"permissions": {"allow": ["Read(**)"]}})
    local = write_json(
        temp_project_dir / ".claude" / "settings.local.json",
        {"permissions": {"allow": ["Bash(npm test)", "Bash(ls)"]}},
    )

    added = service.promote_rule("Bash(npm test)", ALLOW, Scope.PROJECT_LOCAL, temp_project_dir)

    assert added
    assert read_json(home_dir / ".claude" / "settings.json") == {
        "permissions": {"allow": ["Read(**)", "Bash(npm test)"]}
    }
    assert read_json(local) == {"permissions": {"allow": ["Bash(ls)"]}}


def test_promote_rule_already_global(
    service: PermissionCopyService,
    home_dir: Path,
    temp_project_dir: Path,
    write_json: Callable[[Path, Any], Path],
    read_json: Callable[[Path], Any],
) -> None:
    """Test promoting a rule Global already has still removes it from the project."""
    write_json(home_dir / ".claude" / "settings.json", {"permissions": {"deny": ["X"]}})
    shared = write_json(
        temp_project_dir / ".claude" / "settings.json", {"permissions": {"deny": ["X"]}}
    )

    added = service.promote_rule("X", DENY, Scope.PROJECT_SHARED, temp_project_dir)

    assert not added
    assert read_json(shared) == {}


def test_promote_from_global_rejected(
    service: PermissionCopyService, temp_project_dir: Path
) -> None:
    """Test a global rule cannot be promoted."""
    with pytest.raises(ConfigKitError):
        service.promote_rule("X", ALLOW, Scope.GLOBAL, temp_project_dir)
