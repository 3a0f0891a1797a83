"""Constants for claude-config-kit.

This module contains:
- VERSION: Package version
- Bundle format configuration
- Sensitive key detection patterns
- Serialization settings

For paths, messages, and runtime settings, import from:
- claude_config_kit.config.paths
- claude_config_kit.config.messages
- claude_config_kit.config.settings
"""

from claude_config_kit import __version__

# =============================================================================
# Version
# =============================================================================

VERSION = __version__

# =============================================================================
# Bundle Format
# =============================================================================

BUNDLE_FORMAT_VERSION = 1

# =============================================================================
# Serialization
# =============================================================================

JSON_INDENT = 2

# =============================================================================
# Sensitive Data Detection
# =============================================================================

# Case-insensitive substrings that mark an env var or header as sensitive.
SENSITIVE_KEY_PATTERNS: tuple[str, ...] = (
    "token",
    "key",
    "secret",
    "password",
    "passwd",
    "credential",
    "auth",
    "api",
)

# Checked in order; first match decides the warning text.
SENSITIVE_REASONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("token",), "May contain authentication token"),
    (("key", "api"), "May contain API key"),
    (("secret",), "May contain secret value"),
    (("password", "passwd"), "May contain password"),
    (("credential", "auth"), "May contain credentials"),
)
DEFAULT_SENSITIVE_REASON = "May contain sensitive data"

REDACTED_VALUE_TEMPLATE = "<YOUR_{key}>"

# =============================================================================
# MCP Server Copy
# =============================================================================

COPY_SUFFIX = "-copy"
