"""Bundle export and import commands."""

from pathlib import Path

import typer

from claude_config_kit.config.messages import (
    ERROR_MESSAGES,
    INFO_MESSAGES,
    SUCCESS_MESSAGES,
)
from claude_config_kit.config.paths import BUNDLE_FILE_EXTENSION
from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.enums import ImportWizardStep
from claude_config_kit.services.bundle_codec import BundleService
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.import_wizard import ImportWizard
from claude_config_kit.services.mcp_sharing_service import MCPSharingService
from claude_config_kit.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

from .common import parse_components, parse_resolutions, resolve_project


class ConsoleNotifier:
    """Notifier printing to the rich console."""

    def success(self, title: str, message: str) -> None:
        print_success(f"{title}: {message}")

    def warning(self, title: str, message: str) -> None:
        print_warning(f"{title}: {message}")

    def error(self, title: str, message: str) -> None:
        print_error(f"{title}: {message}")


def export_command(
    project: Path | None,
    output: Path,
    components: list[str] | None,
    redact: bool | None,
) -> None:
    """Export a project's configuration to a bundle file."""
    project_path = resolve_project(project)
    store = ConfigStore()
    preferences = store.load_kit_config().export
    selected = parse_components(components, preferences.components)
    redact_values = preferences.redact_sensitive if redact is None else redact

    if not output.suffix:
        output = output.with_suffix(BUNDLE_FILE_EXTENSION)

    try:
        bundle = BundleService(store).export_to_file(
            project_path, output, selected, redact=redact_values
        )
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if bundle.contains_sensitive_data and bundle.mcp_servers is not None:
        warnings = MCPSharingService(store).detect_sensitive_data(bundle.mcp_servers.servers)
        if warnings and not redact_values:
            print_warning(INFO_MESSAGES["sensitive_warning"])
            for warning in warnings:
                console.print(f"  [yellow]{warning.key}[/yellow]: {warning.reason}")

    for line in bundle.content_summary:
        console.print(f"  {line}")
    print_success(
        SUCCESS_MESSAGES["exported"].format(count=len(bundle.available_components), path=output)
    )


def import_command(
    bundle_path: Path,
    project: Path | None,
    components: list[str] | None,
    resolutions: list[str] | None,
    acknowledge_sensitive: bool,
    dry_run: bool,
) -> None:
    """Import a bundle into a project, driving the import wizard."""
    project_path = resolve_project(project)
    if not bundle_path.is_file():
        print_error(ERROR_MESSAGES["bundle_not_found"].format(path=bundle_path))
        raise typer.Exit(code=1)

    store = ConfigStore()
    chosen = parse_resolutions(resolutions)
    default_resolution = store.load_kit_config().import_.default_resolution

    wizard = ImportWizard(project_path, store=store, notifier=ConsoleNotifier())

    # Select file
    if not wizard.load_bundle_file(bundle_path):
        print_error(wizard.error_message or "Could not load bundle")
        raise typer.Exit(code=1)
    wizard.next_step()

    # Select components
    if components:
        requested = parse_components(components, [])
        missing = [c for c in requested if c not in wizard.available_components]
        for component in missing:
            print_warning(f"Bundle has no {component.label}; ignoring")
        wizard.selected_components = {c for c in requested if c not in missing}
    wizard.acknowledged_sensitive_data = acknowledge_sensitive

    if not wizard.can_proceed:
        if not wizard.selected_components:
            print_error(ERROR_MESSAGES["no_components"])
        else:
            print_error(ERROR_MESSAGES["sensitive_not_acknowledged"])
        raise typer.Exit(code=1)
    if not wizard.next_step():
        print_error(wizard.error_message or "Conflict detection failed")
        raise typer.Exit(code=1)

    # Resolve conflicts
    for conflict in wizard.conflicts:
        print_warning(f"{conflict.component.label}: {conflict.description}")
        if conflict.component not in chosen and default_resolution is not None:
            wizard.set_resolution(conflict.component, default_resolution)
    for component, resolution in chosen.items():
        wizard.set_resolution(component, resolution)

    if wizard.current_step is ImportWizardStep.RESOLVE_CONFLICTS:
        if not wizard.next_step():
            names = ", ".join(c.component.value for c in wizard.unresolved_conflicts)
            print_error(ERROR_MESSAGES["unresolved_conflicts"].format(components=names))
            raise typer.Exit(code=1)
    elif not wizard.conflicts:
        print_info(INFO_MESSAGES["no_conflicts"])

    # Preview
    for component, document in wizard.preview().items():
        if document is None:
            console.print(f"  [dim]{component.label}: skipped[/dim]")
        else:
            resolution = wizard.resolutions.get(component)
            action = resolution.display_name if resolution else "Import"
            console.print(f"  {component.label}: {action}")

    if dry_run:
        print_info(INFO_MESSAGES["dry_run"])
        return

    # Complete
    wizard.next_step()
    result = wizard.import_result
    if result is None:
        raise typer.Exit(code=1)
    if result.needs_redetection:
        print_warning("Some files changed during the import; run the import again to re-check")
    if not result.success:
        if result.errors:
            for error in result.errors:
                print_error(error)
            raise typer.Exit(code=1)
        print_info(result.message)
