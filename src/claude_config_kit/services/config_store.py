"""Config store for Claude Code configuration files.

This module reads and writes the JSON documents Claude Code keeps on disk:

    ~/.claude/settings.json            global settings        (Scope.GLOBAL)
    <project>/.claude/settings.json    project-shared         (Scope.PROJECT_SHARED)
    <project>/.claude/settings.local.json  project-local     (Scope.PROJECT_LOCAL)
    <project>/.mcp.json                project MCP servers
    ~/.claude.json                     global user config (global MCP servers)

Key Classes:
    ConfigStore: Typed read/write access with backups and atomic writes
    ConfigSnapshot: All documents of one project read at the same instant

Reads return None for a missing file and raise ConfigReadError for a file
that exists but cannot be used. Writes are atomic per file and can be
checked against a snapshot so that an external edit made after the
snapshot raises StaleConfigError instead of being overwritten.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from claude_config_kit.config.paths import (
    GLOBAL_SETTINGS_FILE,
    GLOBAL_USER_CONFIG_FILE,
    KIT_CONFIG_FILE,
    PROJECT_LOCAL_SETTINGS_FILE,
    PROJECT_MCP_FILE,
    PROJECT_SETTINGS_FILE,
)
from claude_config_kit.config.settings import StoreSettings
from claude_config_kit.exceptions import (
    ConfigReadError,
    ConfigWriteError,
    ProjectPathRequiredError,
    StaleConfigError,
)
from claude_config_kit.models.config import KitConfig
from claude_config_kit.models.enums import ConfigBundleComponent, Scope
from claude_config_kit.models.mcp import GlobalUserConfig, HttpServer, MCPConfig, StdioServer
from claude_config_kit.models.results import CopyDestination
from claude_config_kit.models.settings import ConfigDocument, RawConfig
from claude_config_kit.utils import (
    backup_file,
    dump_json,
    file_exists,
    file_fingerprint,
    read_file,
    write_file_atomic,
)

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=ConfigDocument)

Fingerprint = tuple[int, int] | None


@dataclass(frozen=True)
class ConfigSnapshot:
    """Every document relevant to one project, read together.

    ``fingerprints`` records the on-disk state of each file at read time
    (None for files that did not exist).
    """

    project_path: Path
    global_settings: RawConfig | None = None
    project_settings: RawConfig | None = None
    local_settings: RawConfig | None = None
    mcp_config: MCPConfig | None = None
    fingerprints: dict[Path, Fingerprint] = field(default_factory=dict)

    def settings_for(self, scope: Scope) -> RawConfig | None:
        """Return the settings document of a scope."""
        if scope is Scope.GLOBAL:
            return self.global_settings
        if scope is Scope.PROJECT_SHARED:
            return self.project_settings
        return self.local_settings

    def document_for(self, component: ConfigBundleComponent) -> ConfigDocument | None:
        """Return the persisted document backing a bundle component."""
        if component is ConfigBundleComponent.SETTINGS:
            return self.project_settings
        if component is ConfigBundleComponent.LOCAL_SETTINGS:
            return self.local_settings
        return self.mcp_config


class ConfigStore:
    """Reads and writes Claude Code configuration documents.

    Instances hold no cached content: every read goes to disk, so callers
    always see the current files.
    """

    def __init__(
        self,
        settings: StoreSettings | None = None,
        home_dir: Path | None = None,
        create_backups: bool | None = None,
    ):
        """Initialize config store.

        Args:
            settings: Runtime settings (defaults to environment-driven settings)
            home_dir: Override of the user's home directory
            create_backups: Override of the backup-before-write setting
        """
        self.settings = settings or StoreSettings()
        self.home_dir = home_dir or self.settings.home_dir
        self.create_backups = (
            self.settings.create_backups if create_backups is None else create_backups
        )

    # =========================================================================
    # Paths
    # =========================================================================

    @property
    def global_settings_path(self) -> Path:
        return self.home_dir / GLOBAL_SETTINGS_FILE

    @property
    def global_user_config_path(self) -> Path:
        return self.home_dir / GLOBAL_USER_CONFIG_FILE

    @property
    def kit_config_path(self) -> Path:
        return self.home_dir / KIT_CONFIG_FILE

    def settings_path(self, scope: Scope, project_path: Path | None = None) -> Path:
        """Return the settings file of a scope.

        Raises:
            ProjectPathRequiredError: If a project scope is requested without a path.
        """
        if scope is Scope.GLOBAL:
            return self.global_settings_path
        if project_path is None:
            raise ProjectPathRequiredError(scope.value)
        if scope is Scope.PROJECT_SHARED:
            return project_path / PROJECT_SETTINGS_FILE
        return project_path / PROJECT_LOCAL_SETTINGS_FILE

    def mcp_config_path(self, project_path: Path) -> Path:
        return project_path / PROJECT_MCP_FILE

    def component_path(self, component: ConfigBundleComponent, project_path: Path) -> Path:
        """Return the project file backing a bundle component."""
        if component is ConfigBundleComponent.SETTINGS:
            return self.settings_path(Scope.PROJECT_SHARED, project_path)
        if component is ConfigBundleComponent.LOCAL_SETTINGS:
            return self.settings_path(Scope.PROJECT_LOCAL, project_path)
        return self.mcp_config_path(project_path)

    def fingerprint(self, path: Path) -> Fingerprint:
        """Return the current on-disk fingerprint of a file."""
        return file_fingerprint(path)

    # =========================================================================
    # Settings documents
    # =========================================================================

    def read_raw_config(self, scope: Scope, project_path: Path | None = None) -> RawConfig | None:
        """Read the settings document of a scope (None if the file doesn't exist)."""
        return self._read_document(RawConfig, self.settings_path(scope, project_path))

    def write_raw_config(
        self,
        scope: Scope,
        config: RawConfig,
        project_path: Path | None = None,
        snapshot: ConfigSnapshot | None = None,
    ) -> None:
        """Persist the settings document of a scope.

        Args:
            scope: Scope to write
            config: Settings document
            project_path: Project root (required for project scopes)
            snapshot: If given, refuse to write when the file changed since it
        """
        self._write_document(config, self.settings_path(scope, project_path), snapshot)

    # =========================================================================
    # MCP documents
    # =========================================================================

    def read_mcp_config(self, project_path: Path) -> MCPConfig | None:
        """Read a project's ``.mcp.json``."""
        return self._read_document(MCPConfig, self.mcp_config_path(project_path))

    def write_mcp_config(
        self,
        config: MCPConfig,
        project_path: Path,
        snapshot: ConfigSnapshot | None = None,
    ) -> None:
        """Persist a project's ``.mcp.json``."""
        self._write_document(config, self.mcp_config_path(project_path), snapshot)

    def read_global_user_config(self) -> GlobalUserConfig | None:
        """Read ``~/.claude.json``."""
        return self._read_document(GlobalUserConfig, self.global_user_config_path)

    def write_global_user_config(self, config: GlobalUserConfig) -> None:
        """Persist ``~/.claude.json``."""
        self._write_document(config, self.global_user_config_path, None)

    def write_component(
        self,
        component: ConfigBundleComponent,
        document: ConfigDocument,
        project_path: Path,
        snapshot: ConfigSnapshot | None = None,
    ) -> None:
        """Persist the project file backing a bundle component."""
        self._write_document(document, self.component_path(component, project_path), snapshot)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self, project_path: Path) -> ConfigSnapshot:
        """Read every document of a project together with its fingerprint.

        Fingerprints are taken before the content so a concurrent edit shows
        up as a mismatch at write time rather than being missed.
        """
        paths = [
            self.global_settings_path,
            self.settings_path(Scope.PROJECT_SHARED, project_path),
            self.settings_path(Scope.PROJECT_LOCAL, project_path),
            self.mcp_config_path(project_path),
        ]
        fingerprints = {path: file_fingerprint(path) for path in paths}
        return ConfigSnapshot(
            project_path=project_path,
            global_settings=self.read_raw_config(Scope.GLOBAL),
            project_settings=self.read_raw_config(Scope.PROJECT_SHARED, project_path),
            local_settings=self.read_raw_config(Scope.PROJECT_LOCAL, project_path),
            mcp_config=self.read_mcp_config(project_path),
            fingerprints=fingerprints,
        )

    # =========================================================================
    # MCP server destinations
    # =========================================================================

    def servers_at(self, destination: CopyDestination) -> dict[str, StdioServer | HttpServer]:
        """Return the servers currently defined at a copy destination."""
        if destination.project_path is None:
            user_config = self.read_global_user_config()
            return user_config.servers if user_config else {}
        mcp_config = self.read_mcp_config(destination.project_path)
        return mcp_config.servers if mcp_config else {}

    def put_server(
        self,
        name: str,
        server: StdioServer | HttpServer,
        destination: CopyDestination,
    ) -> None:
        """Add or replace one server at a destination, keeping everything else."""
        if destination.project_path is None:
            user_config = self.read_global_user_config() or GlobalUserConfig()
            servers = user_config.servers
            servers[name] = server
            self.write_global_user_config(user_config.with_servers(servers))
        else:
            mcp_config = self.read_mcp_config(destination.project_path) or MCPConfig()
            servers = mcp_config.servers
            servers[name] = server
            self.write_mcp_config(mcp_config.with_servers(servers), destination.project_path)
        logger.info(f"Wrote MCP server '{name}' to {destination.display_name}")

    # =========================================================================
    # Preferences
    # =========================================================================

    def load_kit_config(self) -> KitConfig:
        """Load user preferences (defaults if absent)."""
        return KitConfig.load(self.kit_config_path)

    # =========================================================================
    # Internals
    # =========================================================================

    def _read_document(self, model: type[DocumentT], path: Path) -> DocumentT | None:
        if not file_exists(path):
            logger.debug(f"File not found (expected): {path}")
            return None

        try:
            content = read_file(path)
        except PermissionError as e:
            logger.error(f"Permission denied: {path}")
            raise ConfigReadError(
                f"Permission denied: {path}. Check file permissions.", path
            ) from e
        except OSError as e:
            logger.error(f"Read error for {path}: {e}")
            raise ConfigReadError(f"Failed to read {path.name}: {e}", path) from e
        except UnicodeDecodeError as e:
            logger.error(f"Encoding error in {path}: {e}")
            raise ConfigReadError(f"Invalid JSON in {path.name}: {e}", path) from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error in {path}: {e}")
            raise ConfigReadError(f"Invalid JSON in {path.name}: {e}", path) from e

        if not isinstance(data, dict):
            raise ConfigReadError(f"Expected a JSON object in {path.name}", path)

        try:
            document = model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected document shape in {path}: {e}")
            raise ConfigReadError(f"Invalid configuration in {path.name}: {e}", path) from e

        logger.debug(f"Successfully read: {path}")
        return document

    def _write_document(
        self,
        document: ConfigDocument,
        path: Path,
        snapshot: ConfigSnapshot | None,
    ) -> None:
        if snapshot is not None and path in snapshot.fingerprints:
            if file_fingerprint(path) != snapshot.fingerprints[path]:
                logger.warning(f"File changed externally since it was read: {path}")
                raise StaleConfigError(
                    f"{path.name} was modified after it was read; re-check conflicts", path
                )

        try:
            if self.create_backups and file_exists(path):
                backup_path = backup_file(path)
                logger.debug(f"Created backup: {backup_path}")
        except OSError as e:
            logger.error(f"Failed to create backup of {path}: {e}")
            raise ConfigWriteError(f"Failed to create backup for {path.name}: {e}", path) from e

        try:
            write_file_atomic(path, dump_json(document.to_json_dict()))
        except OSError as e:
            logger.error(f"Write error for {path}: {e}")
            raise ConfigWriteError(f"Failed to write {path.name}: {e}", path) from e

        logger.info(f"Successfully wrote: {path}")
