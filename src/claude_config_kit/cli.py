"""Main CLI entry point for claude-config-kit."""

import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from claude_config_kit.commands.bundle_cmd import export_command, import_command
from claude_config_kit.commands.effective_cmd import effective_command
from claude_config_kit.commands.mcp_cmd import mcp_app
from claude_config_kit.commands.permissions_cmd import permissions_app
from claude_config_kit.config.messages import HELP_TEXT, PROJECT_TAGLINE
from claude_config_kit.config.settings import StoreSettings
from claude_config_kit.constants import VERSION
from claude_config_kit.utils import print_panel

# Load .env file from current directory if it exists
load_dotenv(Path.cwd() / ".env", verbose=False)

# Create main Typer app
app = typer.Typer(
    name="cck",
    help=PROJECT_TAGLINE,
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(mcp_app, name="mcp")
app.add_typer(permissions_app, name="permissions")

# Create console for output
console = Console()


@app.command("effective")
def effective(
    project: Path | None = typer.Argument(None, help="Project directory (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Show the effective configuration of a project.

    Combines Global, Project and Local settings the way Claude Code does and
    shows where every value comes from, including overridden env vars.
    """
    effective_command(project=project, json_output=json_output)


@app.command("export")
def export(
    output: Path = typer.Argument(..., help="Bundle file to write (.claudeconfig)"),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project directory"),
    component: list[str] = typer.Option(
        None,
        "--component",
        "-c",
        help="Component to export (repeatable): settings, local-settings, mcp-servers",
    ),
    redact: bool | None = typer.Option(
        None,
        "--redact/--no-redact",
        help="Replace secrets in MCP server env/headers with placeholders",
    ),
) -> None:
    """Export project settings and MCP servers to a bundle."""
    export_command(project=project, output=output, components=component, redact=redact)


@app.command("import")
def import_(
    bundle: Path = typer.Argument(..., help="Bundle file to import"),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project directory"),
    component: list[str] = typer.Option(
        None, "--component", "-c", help="Component to import (repeatable, default: all)"
    ),
    resolution: list[str] = typer.Option(
        None,
        "--resolution",
        "-r",
        help="Conflict resolution per component, e.g. mcp-servers=merge (repeatable)",
    ),
    acknowledge_sensitive: bool = typer.Option(
        False,
        "--acknowledge-sensitive",
        help="Confirm that importing local settings (which may hold secrets) is intended",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Show what would change without writing"
    ),
) -> None:
    """Import a bundle into a project, resolving conflicts."""
    import_command(
        bundle_path=bundle,
        project=project,
        components=component,
        resolutions=resolution,
        acknowledge_sensitive=acknowledge_sensitive,
        dry_run=dry_run,
    )


@app.command("version")
def version() -> None:
    """Show version information."""
    print_panel(
        f"[bold cyan]claude-config-kit[/bold cyan] version [green]{VERSION}[/green]\n\n"
        f"{PROJECT_TAGLINE}",
        title="Version",
        style="cyan",
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version_flag: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version information",
        is_eager=True,
    ),
) -> None:
    """claude-config-kit - layered Claude Code configuration.

    Get started:
        cck effective             # Show merged settings of this project
        cck export team.claudeconfig
        cck import team.claudeconfig -p ../other-project
    """
    _configure_logging(verbose)

    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(HELP_TEXT)
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else StoreSettings().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    app()
