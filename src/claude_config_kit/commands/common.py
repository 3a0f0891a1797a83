"""Argument parsing shared by the CLI commands."""

from pathlib import Path

import typer

from claude_config_kit.config.messages import ERROR_MESSAGES
from claude_config_kit.models.enums import ConfigBundleComponent, ImportResolution
from claude_config_kit.utils import print_error


def resolve_project(path: Path | None) -> Path:
    """Return an existing project directory (the working directory by default)."""
    project_path = (path or Path.cwd()).expanduser().resolve()
    if not project_path.is_dir():
        print_error(ERROR_MESSAGES["project_not_found"].format(path=project_path))
        raise typer.Exit(code=1)
    return project_path


def parse_component(value: str) -> ConfigBundleComponent:
    try:
        return ConfigBundleComponent.parse(value)
    except ValueError:
        print_error(
            ERROR_MESSAGES["unknown_component"].format(
                value=value, choices=", ".join(ConfigBundleComponent.values())
            )
        )
        raise typer.Exit(code=1) from None


def parse_components(
    values: list[str] | None, default: list[ConfigBundleComponent]
) -> list[ConfigBundleComponent]:
    """Parse ``--component`` options, falling back to ``default``."""
    if not values:
        return list(default)
    return [parse_component(value) for value in values]


def parse_resolutions(values: list[str] | None) -> dict[ConfigBundleComponent, ImportResolution]:
    """Parse ``component=resolution`` pairs such as ``mcp-servers=merge``."""
    resolutions: dict[ConfigBundleComponent, ImportResolution] = {}
    for value in values or []:
        component_name, sep, resolution_name = value.partition("=")
        if not sep:
            print_error(ERROR_MESSAGES["invalid_resolution"].format(value=value))
            raise typer.Exit(code=1)
        try:
            resolution = ImportResolution(resolution_name.strip().lower())
        except ValueError:
            print_error(ERROR_MESSAGES["invalid_resolution"].format(value=value))
            raise typer.Exit(code=1) from None
        resolutions[parse_component(component_name.strip())] = resolution
    return resolutions
