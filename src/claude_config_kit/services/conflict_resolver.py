"""Conflict resolution and application of bundle imports.

Applies a bundle to a project once every detected conflict has a
resolution:

    overwrite  the bundle payload replaces the persisted document
    skip       the component is left untouched
    merge      settings: rules and disallowed tools are unioned, env and
               attribution take the bundle's value, hook groups not yet
               present are appended after the existing ones
               mcpServers: new server names are added, existing ones kept

Merging is idempotent: importing the same bundle twice leaves the files as
they were after the first import. Each component is written on its own,
so a failure in one is reported without hiding the others' success.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from claude_config_kit.config.messages import IMPORT_MESSAGES
from claude_config_kit.exceptions import (
    ConfigKitError,
    ConflictUnresolvedError,
    StaleConfigError,
)
from claude_config_kit.models.bundle import ConfigBundle
from claude_config_kit.models.enums import (
    COMPONENT_ORDER,
    ConfigBundleComponent,
    ImportResolution,
    Scope,
)
from claude_config_kit.models.mcp import MCPConfig
from claude_config_kit.models.results import ImportConflict, ImportResult
from claude_config_kit.models.settings import (
    ConfigDocument,
    HookGroup,
    Permissions,
    RawConfig,
)
from claude_config_kit.services.config_store import ConfigSnapshot, ConfigStore
from claude_config_kit.services.conflict_detector import ConflictDetector

logger = logging.getLogger(__name__)


def _union(existing: list[str] | None, incoming: list[str]) -> list[str]:
    """Keep existing order and append unseen incoming entries."""
    result = list(existing or [])
    seen = set(result)
    for item in incoming:
        if item not in seen:
            result.append(item)
            seen.add(item)
    return result


def _append_new_groups(existing: list[HookGroup], incoming: list[HookGroup]) -> list[HookGroup]:
    # Only groups already on disk are skipped; repeats within the bundle are kept.
    present = [group.to_json_dict() for group in existing]
    return list(existing) + [group for group in incoming if group.to_json_dict() not in present]


def merge_settings(existing: RawConfig, incoming: RawConfig) -> RawConfig:
    """Merge an incoming settings document into an existing one.

    Unknown keys follow the override rule: the incoming value wins.
    """
    merged: dict[str, Any] = existing.to_json_dict()
    merged.update(incoming.extra_keys)

    if incoming.permissions is not None:
        permissions: dict[str, Any] = (
            existing.permissions.to_json_dict() if existing.permissions is not None else {}
        )
        permissions.update(incoming.permissions.extra_keys)
        current = existing.permissions or Permissions()
        if incoming.permissions.allow is not None:
            permissions["allow"] = _union(current.allow, incoming.permissions.allow)
        if incoming.permissions.deny is not None:
            permissions["deny"] = _union(current.deny, incoming.permissions.deny)
        merged["permissions"] = permissions

    if incoming.env is not None:
        merged["env"] = {**(existing.env or {}), **incoming.env}

    if incoming.hooks is not None:
        hooks = dict(existing.hooks or {})
        for event, groups in incoming.hooks.items():
            hooks[event] = _append_new_groups(hooks.get(event, []), groups)
        merged["hooks"] = {
            event: [group.to_json_dict() for group in groups] for event, groups in hooks.items()
        }

    if incoming.disallowed_tools is not None:
        merged["disallowedTools"] = _union(existing.disallowed_tools, incoming.disallowed_tools)

    if incoming.attribution is not None:
        merged["attribution"] = incoming.attribution.to_json_dict()

    return RawConfig.model_validate(merged)


def merge_mcp_servers(existing: MCPConfig, incoming: MCPConfig) -> MCPConfig:
    """Add incoming servers whose names are not yet defined; keep the rest."""
    servers = existing.servers
    for name, server in incoming.servers.items():
        if name not in servers:
            servers[name] = server
    return existing.with_servers(servers)


class ConflictResolver:
    """Applies bundles to projects according to per-component resolutions."""

    def __init__(
        self,
        store: ConfigStore | None = None,
        detector: ConflictDetector | None = None,
    ):
        """Initialize conflict resolver.

        Args:
            store: Config store that reads and writes the project files
            detector: Detector used when conflicts are not supplied
        """
        self.store = store or ConfigStore()
        self.detector = detector or ConflictDetector(self.store)

    def plan(
        self,
        bundle: ConfigBundle,
        snapshot: ConfigSnapshot,
        components: Iterable[ConfigBundleComponent],
        resolutions: Mapping[ConfigBundleComponent, ImportResolution],
    ) -> dict[ConfigBundleComponent, ConfigDocument | None]:
        """Compute the document each selected component would write.

        Components absent from the bundle are left out; skipped components
        map to None. Nothing is written.
        """
        selected = set(components)
        planned: dict[ConfigBundleComponent, ConfigDocument | None] = {}
        for component in COMPONENT_ORDER:
            if component not in selected or bundle.payload(component) is None:
                continue
            resolution = resolutions.get(component, ImportResolution.MERGE)
            if resolution is ImportResolution.SKIP:
                planned[component] = None
            else:
                planned[component] = self._build_document(bundle, snapshot, component, resolution)
        return planned

    def resolve(
        self,
        bundle: ConfigBundle,
        project_path: Path,
        components: Iterable[ConfigBundleComponent],
        resolutions: Mapping[ConfigBundleComponent, ImportResolution],
        conflicts: list[ImportConflict] | None = None,
        snapshot: ConfigSnapshot | None = None,
    ) -> ImportResult:
        """Apply a bundle to a project.

        Args:
            bundle: Bundle to import
            project_path: Destination project root
            components: Components selected for import
            resolutions: Resolution per component (unresolved non-conflicting
                components are merged)
            conflicts: Previously detected conflicts (detected now if omitted)
            snapshot: Snapshot the conflicts were detected against; a file
                changed since then fails its component with StaleConfigError

        Returns:
            ImportResult naming every imported, skipped and failed component

        Raises:
            ConflictUnresolvedError: If a conflict has no resolution.
            ConfigReadError: If the project cannot be read to take a snapshot.
        """
        selected = set(components)
        if snapshot is None:
            snapshot = self.store.snapshot(project_path)
        if conflicts is None:
            conflicts = self.detector.detect(bundle, snapshot, selected)

        unresolved = [c.component.value for c in conflicts if c.component not in resolutions]
        if unresolved:
            raise ConflictUnresolvedError(unresolved)

        imported: list[ConfigBundleComponent] = []
        skipped: list[ConfigBundleComponent] = []
        errors: list[str] = []
        stale: list[ConfigBundleComponent] = []

        for component in COMPONENT_ORDER:
            if component not in selected or bundle.payload(component) is None:
                continue

            resolution = resolutions.get(component, ImportResolution.MERGE)
            if resolution is ImportResolution.SKIP:
                logger.debug(f"Skipping {component.value} by resolution")
                skipped.append(component)
                continue

            try:
                document = self._build_document(bundle, snapshot, component, resolution)
                self.store.write_component(component, document, project_path, snapshot)
            except StaleConfigError as e:
                logger.warning(f"Not importing {component.value}, file changed: {e}")
                stale.append(component)
                errors.append(f"{component.label}: {e}")
                continue
            except ConfigKitError as e:
                logger.error(f"Failed to import {component.value}: {e}")
                errors.append(f"{component.label}: {e}")
                continue
            imported.append(component)

        success = not errors and bool(imported)
        if success:
            message = IMPORT_MESSAGES["success"].format(count=len(imported))
        elif errors:
            message = IMPORT_MESSAGES["with_errors"]
        else:
            message = IMPORT_MESSAGES["nothing_imported"]

        logger.info(
            f"Import: {len(imported)} imported, {len(skipped)} skipped, {len(errors)} errors"
        )
        return ImportResult(
            success=success,
            message=message,
            components_imported=imported,
            components_skipped=skipped,
            errors=errors,
            stale_components=stale,
        )

    def _build_document(
        self,
        bundle: ConfigBundle,
        snapshot: ConfigSnapshot,
        component: ConfigBundleComponent,
        resolution: ImportResolution,
    ) -> ConfigDocument:
        if component is ConfigBundleComponent.MCP_SERVERS:
            incoming_mcp = bundle.mcp_servers or MCPConfig()
            existing_mcp = snapshot.mcp_config
            if resolution is ImportResolution.MERGE and existing_mcp is not None:
                return merge_mcp_servers(existing_mcp, incoming_mcp)
            return incoming_mcp

        if component is ConfigBundleComponent.LOCAL_SETTINGS:
            incoming = bundle.local_settings or RawConfig()
        else:
            incoming = bundle.settings or RawConfig()
        existing = snapshot.settings_for(_component_scope(component))
        if resolution is ImportResolution.MERGE and existing is not None:
            return merge_settings(existing, incoming)
        return incoming


def _component_scope(component: ConfigBundleComponent) -> Scope:
    if component is ConfigBundleComponent.LOCAL_SETTINGS:
        return Scope.PROJECT_LOCAL
    return Scope.PROJECT_SHARED
