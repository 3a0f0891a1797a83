"""Enum types for claude-config-kit.

This module provides type-safe enumerations for configuration scopes,
bundle components, conflict resolutions and wizard steps.
"""

from enum import Enum

from claude_config_kit.config.paths import (
    GLOBAL_SETTINGS_FILE,
    PROJECT_LOCAL_SETTINGS_FILE,
    PROJECT_MCP_FILE,
    PROJECT_SETTINGS_FILE,
)


class Scope(str, Enum):
    """Configuration tier a settings document belongs to.

    Ordered by precedence (lowest to highest): a more specific scope
    overrides a less specific one for override-style fields.
    """

    GLOBAL = "global"
    PROJECT_SHARED = "projectShared"
    PROJECT_LOCAL = "projectLocal"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all scope values."""
        return [s.value for s in cls]

    @classmethod
    def ordered(cls) -> list["Scope"]:
        """Return scopes from least to most specific."""
        return sorted(cls, key=lambda s: s.precedence)

    @property
    def precedence(self) -> int:
        """Precedence level (higher wins in overrides)."""
        return _SCOPE_PRECEDENCE[self]

    @property
    def display_name(self) -> str:
        """Display name for the scope."""
        return _SCOPE_DISPLAY_NAMES[self]

    @property
    def label(self) -> str:
        """Short label for the scope."""
        return _SCOPE_LABELS[self]

    @property
    def file_name(self) -> str:
        """Settings file associated with this scope."""
        if self is Scope.GLOBAL:
            return f"~/{GLOBAL_SETTINGS_FILE}"
        if self is Scope.PROJECT_SHARED:
            return PROJECT_SETTINGS_FILE
        return PROJECT_LOCAL_SETTINGS_FILE

    @property
    def is_project_level(self) -> bool:
        """Whether the scope lives inside a project directory."""
        return self is not Scope.GLOBAL

    # str ordering would compare the values alphabetically
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.precedence < other.precedence

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.precedence <= other.precedence

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.precedence > other.precedence

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.precedence >= other.precedence

    __hash__ = str.__hash__


_SCOPE_PRECEDENCE = {
    Scope.GLOBAL: 0,
    Scope.PROJECT_SHARED: 1,
    Scope.PROJECT_LOCAL: 2,
}

_SCOPE_DISPLAY_NAMES = {
    Scope.GLOBAL: "Global",
    Scope.PROJECT_SHARED: "Project",
    Scope.PROJECT_LOCAL: "Local",
}

_SCOPE_LABELS = {
    Scope.GLOBAL: "Global",
    Scope.PROJECT_SHARED: "Shared",
    Scope.PROJECT_LOCAL: "Local",
}


class PermissionType(str, Enum):
    """Permission rule list a rule belongs to."""

    ALLOW = "allow"
    DENY = "deny"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all permission types."""
        return [t.value for t in cls]


class FieldPolicy(str, Enum):
    """How a settings field combines across scopes."""

    OVERRIDE = "override"  # most specific scope wins
    UNION = "union"  # deduplicated, first occurrence wins
    CONCATENATE = "concatenate"  # every entry kept, scope order


class ConfigBundleComponent(str, Enum):
    """Unit of selection for export, import and conflict detection."""

    SETTINGS = "settings"
    LOCAL_SETTINGS = "localSettings"
    MCP_SERVERS = "mcpServers"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all component values."""
        return [c.value for c in cls]

    @classmethod
    def parse(cls, value: str) -> "ConfigBundleComponent":
        """Parse a component from its value or a CLI-friendly spelling.

        Accepts ``localSettings``, ``local-settings`` and ``local_settings``.

        Raises:
            ValueError: If the value names no component.
        """
        normalized = value.replace("-", "").replace("_", "").lower()
        for component in cls:
            if component.value.lower() == normalized:
                return component
        raise ValueError(f"Unknown component: {value}")

    @property
    def display_name(self) -> str:
        """Display name including the backing file."""
        return {
            ConfigBundleComponent.SETTINGS: f"Settings ({_basename(PROJECT_SETTINGS_FILE)})",
            ConfigBundleComponent.LOCAL_SETTINGS: (
                f"Local Settings ({_basename(PROJECT_LOCAL_SETTINGS_FILE)})"
            ),
            ConfigBundleComponent.MCP_SERVERS: f"MCP Servers ({PROJECT_MCP_FILE})",
        }[self]

    @property
    def label(self) -> str:
        """Short label used to prefix per-component errors."""
        return {
            ConfigBundleComponent.SETTINGS: "Settings",
            ConfigBundleComponent.LOCAL_SETTINGS: "Local Settings",
            ConfigBundleComponent.MCP_SERVERS: "MCP Servers",
        }[self]

    @property
    def is_sensitive(self) -> bool:
        """Whether importing requires an explicit acknowledgement."""
        return self is ConfigBundleComponent.LOCAL_SETTINGS

    @property
    def sensitive_warning(self) -> str | None:
        """Warning shown next to the component, if any."""
        if self is ConfigBundleComponent.LOCAL_SETTINGS:
            return "May contain API keys, tokens, or other sensitive data"
        if self is ConfigBundleComponent.MCP_SERVERS:
            return "May contain environment variables with sensitive data"
        return None


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


# Fixed processing order for multi-component operations
COMPONENT_ORDER: tuple[ConfigBundleComponent, ...] = (
    ConfigBundleComponent.SETTINGS,
    ConfigBundleComponent.LOCAL_SETTINGS,
    ConfigBundleComponent.MCP_SERVERS,
)


class ImportResolution(str, Enum):
    """Resolution chosen for a conflicting bundle component."""

    MERGE = "merge"  # combine with existing
    OVERWRITE = "overwrite"  # replace existing completely
    SKIP = "skip"  # keep existing, do not import

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all resolutions."""
        return [r.value for r in cls]

    @property
    def display_name(self) -> str:
        """Human-readable resolution name."""
        return {
            ImportResolution.MERGE: "Merge with existing",
            ImportResolution.OVERWRITE: "Replace existing",
            ImportResolution.SKIP: "Skip (keep existing)",
        }[self]


class CopyAction(str, Enum):
    """Resolution for a single MCP server name collision."""

    OVERWRITE = "overwrite"
    RENAME = "rename"
    SKIP = "skip"


class ConflictStrategy(str, Enum):
    """Up-front strategy for handling server name collisions."""

    PROMPT = "prompt"  # stop and ask
    OVERWRITE = "overwrite"
    RENAME = "rename"  # auto-suffix with -copy
    SKIP = "skip"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all strategies."""
        return [s.value for s in cls]


class ImportWizardStep(str, Enum):
    """Steps of the import wizard."""

    SELECT_FILE = "selectFile"
    SELECT_COMPONENTS = "selectComponents"
    RESOLVE_CONFLICTS = "resolveConflicts"
    PREVIEW = "preview"
    COMPLETE = "complete"
