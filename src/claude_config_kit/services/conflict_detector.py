"""Conflict detection for bundle imports.

Compares a bundle against what a project already has on disk and produces
a declarative list of ImportConflict values for the caller to resolve.
Detection never writes and never mutates its inputs.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from claude_config_kit.config.messages import IMPORT_MESSAGES
from claude_config_kit.models.bundle import ConfigBundle
from claude_config_kit.models.enums import COMPONENT_ORDER, ConfigBundleComponent
from claude_config_kit.models.mcp import MCPConfig
from claude_config_kit.models.results import ImportConflict
from claude_config_kit.models.settings import ConfigDocument
from claude_config_kit.services.config_store import ConfigSnapshot, ConfigStore

logger = logging.getLogger(__name__)


def _has_content(document: ConfigDocument | None) -> bool:
    return document is not None and not document.is_empty


class ConflictDetector:
    """Finds bundle components that collide with persisted configuration.

    - settings / localSettings: whole-document; conflicts when both the
      bundle payload and the existing file are non-empty
    - mcpServers: per server name; conflicts only on name collisions
    """

    def __init__(self, store: ConfigStore | None = None):
        """Initialize conflict detector.

        Args:
            store: Config store used by detect_for_project (created on demand)
        """
        self._store = store

    @property
    def store(self) -> ConfigStore:
        if self._store is None:
            self._store = ConfigStore()
        return self._store

    def detect(
        self,
        bundle: ConfigBundle,
        target: ConfigSnapshot,
        components: Iterable[ConfigBundleComponent],
    ) -> list[ImportConflict]:
        """Return one conflict per selected component that collides.

        Args:
            bundle: Bundle being imported
            target: Snapshot of the destination project
            components: Components selected for import

        Returns:
            Conflicts in component processing order (empty if none)
        """
        selected = set(components)
        conflicts: list[ImportConflict] = []

        for component in COMPONENT_ORDER:
            if component not in selected:
                continue
            conflict = self._detect_component(bundle, target, component)
            if conflict is not None:
                conflicts.append(conflict)

        logger.debug(f"Detected {len(conflicts)} conflict(s) for {target.project_path}")
        return conflicts

    def detect_for_project(
        self,
        bundle: ConfigBundle,
        project_path: Path,
        components: Iterable[ConfigBundleComponent],
    ) -> list[ImportConflict]:
        """Snapshot a project and detect conflicts against it."""
        return self.detect(bundle, self.store.snapshot(project_path), components)

    def _detect_component(
        self,
        bundle: ConfigBundle,
        target: ConfigSnapshot,
        component: ConfigBundleComponent,
    ) -> ImportConflict | None:
        if component is ConfigBundleComponent.MCP_SERVERS:
            return self._detect_mcp(bundle.mcp_servers, target.mcp_config)

        incoming = bundle.payload(component)
        existing = target.document_for(component)
        if not (_has_content(incoming) and _has_content(existing)):
            return None

        key = (
            "settings_conflict"
            if component is ConfigBundleComponent.SETTINGS
            else "local_settings_conflict"
        )
        return ImportConflict(component=component, description=IMPORT_MESSAGES[key])

    @staticmethod
    def _detect_mcp(
        incoming: MCPConfig | None, existing: MCPConfig | None
    ) -> ImportConflict | None:
        if incoming is None or existing is None:
            return None

        colliding = sorted(set(incoming.servers) & set(existing.servers))
        if not colliding:
            return None

        return ImportConflict(
            component=ConfigBundleComponent.MCP_SERVERS,
            description=IMPORT_MESSAGES["mcp_conflict"].format(names=", ".join(colliding)),
            colliding_names=tuple(colliding),
        )
