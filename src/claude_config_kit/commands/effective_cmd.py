"""Effective configuration command.

Shows what Claude Code will actually apply in a project once Global,
Project and Local settings are combined, with the scope each value came
from and the env values that were overridden.
"""

import json
from pathlib import Path

import typer
from rich.table import Table

from claude_config_kit.config.messages import ERROR_MESSAGES
from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.effective import EffectiveConfig
from claude_config_kit.models.enums import PermissionType, Scope
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.merge_engine import MergeEngine
from claude_config_kit.utils import console, print_error, print_info

from .common import resolve_project

SCOPE_STYLES = {
    Scope.GLOBAL: "blue",
    Scope.PROJECT_SHARED: "green",
    Scope.PROJECT_LOCAL: "yellow",
}


def _badge(scope: Scope) -> str:
    return f"[{SCOPE_STYLES[scope]}]{scope.label}[/{SCOPE_STYLES[scope]}]"


def _print_permissions(effective: EffectiveConfig) -> None:
    table = Table(title="Permissions", show_lines=False)
    table.add_column("Type")
    table.add_column("Rule")
    table.add_column("Source")
    table.add_column("Also defined in", style="dim")

    for permission_type in PermissionType:
        for entry in effective.permissions.entries(permission_type):
            others = effective.provenance.scopes_for_rule(entry.value, permission_type) - {
                entry.source
            }
            table.add_row(
                permission_type.value,
                entry.value,
                _badge(entry.source),
                ", ".join(s.label for s in sorted(others)),
            )
    console.print(table)


def _print_env(effective: EffectiveConfig) -> None:
    table = Table(title="Environment")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Source")

    for key in sorted(effective.env):
        winner = effective.env[key]
        table.add_row(key, winner.value, _badge(winner.source))
        for shadowed in effective.provenance.overridden_env(key):
            table.add_row(
                f"[dim strike]{key}[/dim strike]",
                f"[dim strike]{shadowed.value}[/dim strike]",
                f"[dim]{shadowed.source.label} (overridden)[/dim]",
            )
    console.print(table)


def _print_hooks(effective: EffectiveConfig) -> None:
    table = Table(title="Hooks")
    table.add_column("Event")
    table.add_column("Matcher")
    table.add_column("Commands")
    table.add_column("Source")

    for event in effective.event_names:
        for entry in effective.hook_groups(event):
            group = entry.value
            commands = [hook.command or "" for hook in group.hooks or []]
            table.add_row(event, group.matcher or "*", "\n".join(commands), _badge(entry.source))
    console.print(table)


def effective_command(project: Path | None, json_output: bool) -> None:
    """Print the effective configuration of a project."""
    project_path = resolve_project(project)

    try:
        effective = MergeEngine(ConfigStore()).resolve_project(project_path)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print(json.dumps(effective.to_dict(), indent=2))
        return

    if not (
        effective.permissions.allow
        or effective.permissions.deny
        or effective.env
        or effective.hooks
        or effective.disallowed_tools
        or effective.attribution
    ):
        print_info(ERROR_MESSAGES["no_configuration"].format(path=project_path))
        return

    if effective.permissions.allow or effective.permissions.deny:
        _print_permissions(effective)
    if effective.env:
        _print_env(effective)
    if effective.hooks:
        _print_hooks(effective)
    if effective.disallowed_tools:
        tools = ", ".join(
            f"{entry.value} ({entry.source.label})" for entry in effective.disallowed_tools
        )
        console.print(f"[bold]Disallowed tools:[/bold] {tools}")
    if effective.attribution:
        value = effective.attribution.value
        console.print(
            f"[bold]Attribution:[/bold] commits={value.commits} "
            f"pullRequests={value.pull_requests} ({effective.attribution.source.label})"
        )
