"""UI messages and strings for claude-config-kit.

This module consolidates user-facing text:
- CLI help and taglines
- Success/error/info messages
- Import and copy result messages
"""

# =============================================================================
# Project Metadata
# =============================================================================

PROJECT_TAGLINE = "Layered Claude Code configuration: resolve, export, import"

HELP_TEXT = f"""
[bold cyan]cck[/bold cyan] - {PROJECT_TAGLINE}

[bold]Commands:[/bold]
  [cyan]effective[/cyan]    Show the merged configuration of a project with provenance
  [cyan]export[/cyan]       Export project settings and MCP servers to a bundle
  [cyan]import[/cyan]       Import a bundle into a project, resolving conflicts
  [cyan]mcp[/cyan]          Copy MCP servers between projects and the global config
  [cyan]permissions[/cyan]  Move permission rules between scopes
"""

# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES = {
    "project_not_found": "Project directory not found: {path}",
    "no_configuration": "No configuration found for {path}",
    "bundle_not_found": "Bundle file not found: {path}",
    "file_not_found": "File not found: {path}",
    "invalid_resolution": (
        "Invalid resolution '{value}'. Expected <component>=<merge|overwrite|skip>"
    ),
    "unknown_component": "Unknown component '{value}'. Expected one of: {choices}",
    "server_not_found": "MCP server '{name}' not found in {source}",
    "sensitive_not_acknowledged": (
        "Local settings may contain secrets. Re-run with --acknowledge-sensitive to import them."
    ),
    "no_components": "Select at least one component to continue.",
    "unresolved_conflicts": "Every conflict needs a resolution: {components}",
    "destination_required": "Choose a destination with --to-project or --to-global",
}

# =============================================================================
# Success / Info Messages
# =============================================================================

SUCCESS_MESSAGES = {
    "exported": "Exported {count} component(s) to {path}",
    "rule_promoted": "Moved '{rule}' from {source} to Global",
    "rule_already_global": "'{rule}' already exists in Global; removed from {source}",
}

INFO_MESSAGES = {
    "dry_run": "Dry run: no files were written",
    "no_conflicts": "No conflicts detected",
    "sensitive_warning": "Sensitive values detected:",
}

# =============================================================================
# Import / Copy Results
# =============================================================================

IMPORT_MESSAGES = {
    "success": "Successfully imported {count} component(s)",
    "with_errors": "Import completed with errors",
    "nothing_imported": "No components were imported",
    "settings_conflict": "Project already has settings.json",
    "local_settings_conflict": "Project already has settings.local.json",
    "mcp_conflict": "Servers already defined in project: {names}",
}

COPY_MESSAGES = {
    "copied": "Successfully copied '{name}'",
    "copied_renamed": "Copied '{original}' as '{name}'",
    "skipped_exists": "Skipped - server already exists",
    "skipped_by_user": "Skipped by user",
    "conflict": "Conflict detected - server '{name}' already exists",
}
