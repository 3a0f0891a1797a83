"""CLI commands for claude-config-kit."""

from claude_config_kit.commands.bundle_cmd import export_command, import_command
from claude_config_kit.commands.effective_cmd import effective_command
from claude_config_kit.commands.mcp_cmd import mcp_app
from claude_config_kit.commands.permissions_cmd import permissions_app

__all__ = [
    "effective_command",
    "export_command",
    "import_command",
    "mcp_app",
    "permissions_app",
]
