"""Permission rule commands.

Commands:
- promote: Move a project rule to the global settings
- copy: Copy a rule to another scope
"""

from enum import Enum
from pathlib import Path

import typer

from claude_config_kit.config.messages import SUCCESS_MESSAGES
from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.enums import PermissionType, Scope
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.permission_copy_service import PermissionCopyService
from claude_config_kit.utils import print_error, print_info, print_success

from .common import resolve_project

permissions_app = typer.Typer(
    name="permissions",
    help="Move permission rules between scopes",
    no_args_is_help=True,
)


class ScopeChoice(str, Enum):
    """Scope names accepted on the command line."""

    GLOBAL = "global"
    SHARED = "shared"
    LOCAL = "local"

    @property
    def scope(self) -> Scope:
        return {
            ScopeChoice.GLOBAL: Scope.GLOBAL,
            ScopeChoice.SHARED: Scope.PROJECT_SHARED,
            ScopeChoice.LOCAL: Scope.PROJECT_LOCAL,
        }[self]


@permissions_app.command("promote")
def promote(
    rule: str = typer.Argument(..., help='Rule pattern, e.g. "Bash(npm run *)"'),
    permission_type: PermissionType = typer.Option(
        PermissionType.ALLOW, "--type", "-t", help="Rule list"
    ),
    from_scope: ScopeChoice = typer.Option(
        ScopeChoice.LOCAL, "--from", help="Project scope that currently holds the rule"
    ),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project directory"),
) -> None:
    """Move a rule from project settings to the global settings.

    Example:
        cck permissions promote "Bash(npm test)" --from local
    """
    if from_scope is ScopeChoice.GLOBAL:
        print_error("Rule is already in the global scope")
        raise typer.Exit(code=1)

    project_path = resolve_project(project)
    service = PermissionCopyService(ConfigStore())
    source = from_scope.scope

    try:
        if not service.is_duplicate(rule, permission_type, source, project_path):
            print_error(f"'{rule}' is not a {permission_type.value} rule in {source.display_name}")
            raise typer.Exit(code=1)
        added = service.promote_rule(rule, permission_type, source, project_path)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    key = "rule_promoted" if added else "rule_already_global"
    print_success(SUCCESS_MESSAGES[key].format(rule=rule, source=source.display_name))


@permissions_app.command("copy")
def copy(
    rule: str = typer.Argument(..., help="Rule pattern"),
    to_scope: ScopeChoice = typer.Option(..., "--to", help="Destination scope"),
    permission_type: PermissionType = typer.Option(
        PermissionType.ALLOW, "--type", "-t", help="Rule list"
    ),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project directory"),
) -> None:
    """Copy a rule into another scope's settings."""
    destination = to_scope.scope
    project_path = resolve_project(project) if destination.is_project_level else None
    service = PermissionCopyService(ConfigStore())

    try:
        added = service.copy_rule(rule, permission_type, destination, project_path)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if added:
        print_success(f"Copied '{rule}' to {destination.display_name}")
    else:
        print_info(f"'{rule}' already exists in {destination.display_name}")
