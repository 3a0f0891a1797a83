"""Result and conflict types for import and copy operations.

Conflicts are declarative: detectors build them without touching disk and
the caller attaches resolutions before anything is written.
"""

from dataclasses import dataclass, field
from pathlib import Path

from claude_config_kit.models.enums import ConfigBundleComponent, CopyAction
from claude_config_kit.models.mcp import HttpServer, StdioServer

# =============================================================================
# Bundle Import
# =============================================================================


@dataclass(frozen=True)
class ImportConflict:
    """A bundle component whose payload collides with persisted content."""

    component: ConfigBundleComponent
    description: str
    colliding_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportResult:
    """Outcome of applying a bundle.

    ``errors`` holds one entry per failed component, prefixed with the
    component label, so a partial import never goes unreported.
    ``stale_components`` lists components whose file changed on disk after
    the snapshot used for detection; those need detecting and resolving again.
    """

    success: bool
    message: str
    components_imported: list[ConfigBundleComponent] = field(default_factory=list)
    components_skipped: list[ConfigBundleComponent] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    stale_components: list[ConfigBundleComponent] = field(default_factory=list)

    @property
    def needs_redetection(self) -> bool:
        """Whether a target file changed after conflicts were detected."""
        return bool(self.stale_components)


# =============================================================================
# MCP Server Copy
# =============================================================================


@dataclass(frozen=True)
class CopyDestination:
    """Where a copied server is written: the global user config or a project."""

    project_path: Path | None = None
    name: str | None = None

    @classmethod
    def global_config(cls) -> "CopyDestination":
        return cls()

    @classmethod
    def project(cls, path: Path, name: str | None = None) -> "CopyDestination":
        return cls(project_path=path, name=name or path.name)

    @property
    def is_global(self) -> bool:
        return self.project_path is None

    @property
    def display_name(self) -> str:
        if self.project_path is None:
            return "Global Configuration"
        return self.name or self.project_path.name


@dataclass(frozen=True)
class CopyResolution:
    """How to resolve a single server name collision."""

    action: CopyAction
    new_name: str | None = None

    @classmethod
    def overwrite(cls) -> "CopyResolution":
        return cls(CopyAction.OVERWRITE)

    @classmethod
    def rename(cls, new_name: str) -> "CopyResolution":
        return cls(CopyAction.RENAME, new_name)

    @classmethod
    def skip(cls) -> "CopyResolution":
        return cls(CopyAction.SKIP)


@dataclass(frozen=True)
class CopyConflict:
    """A server name that already exists at the copy destination."""

    server_name: str
    existing_server: StdioServer | HttpServer
    new_server: StdioServer | HttpServer
    destination: CopyDestination


@dataclass(frozen=True)
class CopyResult:
    """Outcome of copying one server."""

    server_name: str
    destination: CopyDestination
    success: bool
    message: str
    renamed: bool = False
    new_name: str | None = None


@dataclass(frozen=True)
class SensitiveEnvWarning:
    """An env var or header that likely holds a credential."""

    key: str
    reason: str


@dataclass(frozen=True)
class BulkImportResult:
    """Outcome of importing several servers into one destination."""

    imported: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    renamed: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def total_imported(self) -> int:
        return len(self.imported) + len(self.renamed)

    @property
    def summary(self) -> str:
        parts: list[str] = []
        if self.imported:
            parts.append(f"{len(self.imported)} imported")
        if self.renamed:
            parts.append(f"{len(self.renamed)} renamed")
        if self.skipped:
            parts.append(f"{len(self.skipped)} skipped")
        if self.errors:
            parts.append(f"{len(self.errors)} errors")
        return ", ".join(parts)
