"""Custom exceptions for claude-config-kit.

All exceptions inherit from ConfigKitError, allowing callers to catch every
kit error with a single except clause.

Exception hierarchy:
    ConfigKitError (base)
    ├── ConfigReadError
    ├── ConfigWriteError
    │   └── StaleConfigError
    ├── ConflictUnresolvedError
    ├── DuplicateNameError
    ├── InvalidNameError
    ├── ProjectPathRequiredError
    └── BundleError
        ├── BundleFormatError
        ├── UnsupportedBundleVersionError
        └── NoComponentsSelectedError
"""

from pathlib import Path
from typing import Any


class ConfigKitError(Exception):
    """Base exception for all claude-config-kit errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize kit error.

        Args:
            message: Error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Config Store Errors
# =============================================================================


class ConfigReadError(ConfigKitError):
    """Raised when a configuration file exists but cannot be read or parsed.

    Examples:
        - Permission denied
        - Invalid JSON syntax
        - JSON that does not match the expected document shape

    A missing file is not an error; the store returns None for it.
    """

    def __init__(self, message: str, path: Path | None = None):
        details = {"path": str(path)} if path else {}
        super().__init__(message, details)
        self.path = path


class ConfigWriteError(ConfigKitError):
    """Raised when persisting a configuration file fails."""

    def __init__(self, message: str, path: Path | None = None):
        details = {"path": str(path)} if path else {}
        super().__init__(message, details)
        self.path = path


class StaleConfigError(ConfigWriteError):
    """Raised when a file changed on disk after it was snapshotted.

    The caller must re-run conflict detection against fresh content
    instead of overwriting the external edit.
    """


# =============================================================================
# Conflict Errors
# =============================================================================


class ConflictUnresolvedError(ConfigKitError):
    """Raised when an import is applied before every conflict has a resolution.

    The import wizard gates on this, so reaching it indicates a programming error.
    """

    def __init__(self, components: list[str]):
        super().__init__(
            "Import attempted with unresolved conflicts",
            {"components": ", ".join(components)},
        )
        self.components = components


class DuplicateNameError(ConfigKitError):
    """Raised when a rename targets a server name already used at the destination."""

    def __init__(self, name: str, destination: str):
        super().__init__(
            f"A server named '{name}' already exists",
            {"destination": destination},
        )
        self.name = name
        self.destination = destination


class InvalidNameError(ConfigKitError):
    """Raised when a rename target is empty or blank."""


class ProjectPathRequiredError(ConfigKitError):
    """Raised when a project-level scope is used without a project path."""

    def __init__(self, scope: str):
        super().__init__("Project path is required for project-level settings", {"scope": scope})
        self.scope = scope


# =============================================================================
# Bundle Errors
# =============================================================================


class BundleError(ConfigKitError):
    """Base class for bundle encode/decode/export errors."""


class BundleFormatError(BundleError):
    """Raised when bundle or server JSON cannot be decoded."""


class UnsupportedBundleVersionError(BundleError):
    """Raised when a bundle was written by a newer format version."""

    def __init__(self, version: int, supported: int):
        super().__init__(
            f"Unsupported bundle version ({version}). Please upgrade claude-config-kit.",
            {"supported": supported},
        )
        self.version = version
        self.supported = supported


class NoComponentsSelectedError(BundleError):
    """Raised when an export is requested with no components."""

    def __init__(self) -> None:
        super().__init__("No components selected for export.")
