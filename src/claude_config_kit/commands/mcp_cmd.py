"""MCP server commands.

Commands:
- copy: Copy one server between projects and the global config
- share: Print servers as .mcp.json content (optionally redacted)
- paste: Import servers from shared JSON
"""

from pathlib import Path

import click
import typer

from claude_config_kit.config.messages import ERROR_MESSAGES, INFO_MESSAGES
from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.enums import ConflictStrategy, CopyAction
from claude_config_kit.models.results import CopyDestination, CopyResolution, CopyResult
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.mcp_copy_service import MCPServerCopyService
from claude_config_kit.services.mcp_sharing_service import MCPSharingService
from claude_config_kit.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

from .common import resolve_project

mcp_app = typer.Typer(
    name="mcp",
    help="Copy and share MCP server definitions",
    no_args_is_help=True,
)


def _location(project: Path | None, use_global: bool) -> CopyDestination:
    if use_global:
        return CopyDestination.global_config()
    if project is None:
        print_error(ERROR_MESSAGES["destination_required"])
        raise typer.Exit(code=1)
    return CopyDestination.project(resolve_project(project))


def _report(result: CopyResult) -> None:
    if result.success:
        print_success(result.message)
    else:
        print_warning(result.message)


def _ask_resolution(name: str, destination: CopyDestination) -> CopyResolution:
    print_warning(f"Server '{name}' already exists in {destination.display_name}")
    choice = typer.prompt(
        "Overwrite, rename or skip?",
        type=click.Choice([action.value for action in CopyAction]),
        default=CopyAction.SKIP.value,
    )
    action = CopyAction(choice)
    if action is CopyAction.RENAME:
        return CopyResolution.rename(typer.prompt("New name"))
    if action is CopyAction.OVERWRITE:
        return CopyResolution.overwrite()
    return CopyResolution.skip()


@mcp_app.command("copy")
def copy(
    name: str = typer.Argument(..., help="Server name"),
    from_project: Path | None = typer.Option(None, "--from-project", help="Source project"),
    from_global: bool = typer.Option(False, "--from-global", help="Copy from ~/.claude.json"),
    to_project: Path | None = typer.Option(None, "--to-project", help="Destination project"),
    to_global: bool = typer.Option(False, "--to-global", help="Copy to ~/.claude.json"),
    on_conflict: ConflictStrategy = typer.Option(
        ConflictStrategy.PROMPT,
        "--on-conflict",
        help="What to do when the name already exists at the destination",
    ),
    rename_to: str | None = typer.Option(
        None, "--rename-to", help="Copy under this name (must not exist at the destination)"
    ),
) -> None:
    """Copy an MCP server to another project or the global config.

    Example:
        cck mcp copy github --from-project ./api --to-project ./web
        cck mcp copy github --from-project ./api --to-global --on-conflict rename
    """
    source = _location(from_project, from_global)
    destination = _location(to_project, to_global)
    service = MCPServerCopyService(ConfigStore())

    try:
        server = service.find_server(name, source)
        if server is None:
            print_error(
                ERROR_MESSAGES["server_not_found"].format(name=name, source=source.display_name)
            )
            raise typer.Exit(code=1)

        for warning in service.detect_sensitive_env_vars(server):
            print_warning(f"{warning.key}: {warning.reason}")

        if rename_to is not None:
            result = service.copy_server_with_resolution(
                name, server, destination, CopyResolution.rename(rename_to)
            )
        elif on_conflict is ConflictStrategy.PROMPT and service.check_conflict(
            name, server, destination
        ):
            resolution = _ask_resolution(name, destination)
            result = service.copy_server_with_resolution(name, server, destination, resolution)
        else:
            result = service.copy_server(name, server, destination, on_conflict)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _report(result)


@mcp_app.command("share")
def share(
    names: list[str] | None = typer.Argument(None, help="Servers to include (default: all)"),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project to read from"),
    use_global: bool = typer.Option(False, "--global", help="Read from ~/.claude.json"),
    redact: bool = typer.Option(False, "--redact", help="Replace secrets with placeholders"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to a file"),
) -> None:
    """Print MCP servers as .mcp.json content for sharing."""
    source = _location(project, use_global)
    store = ConfigStore()
    service = MCPSharingService(store)

    try:
        servers = store.servers_at(source)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if names:
        unknown = [n for n in names if n not in servers]
        if unknown:
            print_error(
                ERROR_MESSAGES["server_not_found"].format(
                    name=", ".join(unknown), source=source.display_name
                )
            )
            raise typer.Exit(code=1)
        servers = {n: servers[n] for n in names}

    warnings = service.detect_sensitive_data(servers)
    if warnings and not redact:
        print_warning(INFO_MESSAGES["sensitive_warning"])
        for warning in warnings:
            print_warning(f"  {warning.key}: {warning.reason}")

    text = service.serialize_servers(servers, redact=redact)
    if output is None:
        print(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        print_success(f"Wrote {len(servers)} server(s) to {output}")


@mcp_app.command("paste")
def paste(
    source_file: Path = typer.Argument(..., help="File with shared server JSON ('-' for stdin)"),
    to_project: Path | None = typer.Option(None, "--to-project", help="Destination project"),
    to_global: bool = typer.Option(False, "--to-global", help="Import into ~/.claude.json"),
    on_conflict: ConflictStrategy = typer.Option(
        ConflictStrategy.SKIP, "--on-conflict", help="What to do with existing names"
    ),
) -> None:
    """Import MCP servers from shared JSON."""
    destination = _location(to_project, to_global)
    service = MCPSharingService(ConfigStore())

    if str(source_file) == "-":
        text = typer.get_text_stream("stdin").read()
    elif source_file.is_file():
        text = source_file.read_text(encoding="utf-8")
    else:
        print_error(ERROR_MESSAGES["file_not_found"].format(path=source_file))
        raise typer.Exit(code=1)

    try:
        servers = service.parse_servers(text)
        result = service.import_servers(servers, destination, on_conflict)
    except ConfigKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    for original, new_name in result.renamed.items():
        console.print(f"  {original} -> {new_name}")
    for error in result.errors:
        print_error(error)

    if result.total_imported:
        print_success(result.summary)
    else:
        print_info(result.summary or "Nothing to import")
    if result.errors:
        raise typer.Exit(code=1)
