"""Path constants for claude-config-kit.

This module defines where Claude Code keeps each configuration document.
Global paths are relative to the user's home directory, project paths are
relative to the project root.
"""

# =============================================================================
# Global (per-user) files
# =============================================================================

GLOBAL_SETTINGS_FILE = ".claude/settings.json"
GLOBAL_USER_CONFIG_FILE = ".claude.json"

# =============================================================================
# Project files
# =============================================================================

PROJECT_SETTINGS_FILE = ".claude/settings.json"
PROJECT_LOCAL_SETTINGS_FILE = ".claude/settings.local.json"
PROJECT_MCP_FILE = ".mcp.json"

# =============================================================================
# Kit files
# =============================================================================

KIT_CONFIG_FILE = ".claude/config-kit.yaml"

# Backups are written next to the original: <name>.backup.<timestamp>
BACKUP_INFIX = ".backup."
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"

# =============================================================================
# Bundles
# =============================================================================

BUNDLE_FILE_EXTENSION = ".claudeconfig"
