"""Bundle encoding and export.

Key Classes:
    BundleCodec: Bundle <-> bytes, plus file helpers
    BundleService: Builds a bundle from a project's persisted configuration

Bundles are pretty-printed JSON with sorted keys and an ISO-8601
``exportedAt`` timestamp, stored with the ``.claudeconfig`` extension.
"""

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from claude_config_kit.constants import BUNDLE_FORMAT_VERSION, JSON_INDENT
from claude_config_kit.exceptions import (
    BundleFormatError,
    ConfigReadError,
    ConfigWriteError,
    NoComponentsSelectedError,
    UnsupportedBundleVersionError,
)
from claude_config_kit.models.bundle import ConfigBundle
from claude_config_kit.models.enums import ConfigBundleComponent, Scope
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.mcp_sharing_service import MCPSharingService
from claude_config_kit.utils import write_file_atomic

logger = logging.getLogger(__name__)

INVALID_BUNDLE_MESSAGE = (
    "Invalid bundle format. The file may be corrupted or not a valid config bundle."
)


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")


class BundleCodec:
    """Serializes configuration bundles."""

    def __init__(self, supported_version: int = BUNDLE_FORMAT_VERSION):
        self.supported_version = supported_version

    def encode(self, bundle: ConfigBundle) -> bytes:
        """Encode a bundle as UTF-8 JSON."""
        data: dict[str, Any] = bundle.model_dump(mode="json", by_alias=True, exclude_none=True)
        data["exportedAt"] = _format_timestamp(bundle.exported_at)
        text = json.dumps(data, indent=JSON_INDENT, sort_keys=True, ensure_ascii=False)
        return (text + "\n").encode("utf-8")

    def decode(self, data: bytes | str) -> ConfigBundle:
        """Decode a bundle.

        Raises:
            BundleFormatError: If the data is not a bundle.
            UnsupportedBundleVersionError: If the bundle is newer than supported.
        """
        try:
            raw = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BundleFormatError(INVALID_BUNDLE_MESSAGE, {"error": str(e)}) from e

        if not isinstance(raw, dict):
            raise BundleFormatError(INVALID_BUNDLE_MESSAGE)

        version = raw.get("version", BUNDLE_FORMAT_VERSION)
        if isinstance(version, int) and version > self.supported_version:
            raise UnsupportedBundleVersionError(version, self.supported_version)

        try:
            bundle = ConfigBundle.model_validate(raw)
        except ValidationError as e:
            raise BundleFormatError(INVALID_BUNDLE_MESSAGE, {"error": str(e)}) from e

        logger.debug(f"Decoded bundle '{bundle.project_name}' (version {bundle.version})")
        return bundle

    def write(self, bundle: ConfigBundle, path: Path) -> None:
        """Write a bundle to a file.

        Raises:
            ConfigWriteError: If the file cannot be written.
        """
        try:
            write_file_atomic(path, self.encode(bundle).decode("utf-8"))
        except OSError as e:
            raise ConfigWriteError(f"Failed to write bundle: {e}", path) from e
        logger.info(f"Wrote bundle to {path}")

    def read(self, path: Path) -> ConfigBundle:
        """Read a bundle from a file.

        Raises:
            ConfigReadError: If the file cannot be read.
            BundleFormatError: If the file is not a bundle.
        """
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ConfigReadError(f"Failed to read bundle: {e}", path) from e
        bundle = self.decode(data)
        logger.info(f"Read bundle '{bundle.project_name}' from {path}")
        return bundle


class BundleService:
    """Exports a project's configuration as a bundle."""

    def __init__(
        self,
        store: ConfigStore | None = None,
        codec: BundleCodec | None = None,
        sharing: MCPSharingService | None = None,
    ):
        """Initialize bundle service.

        Args:
            store: Config store to read the project from
            codec: Codec used by export_to_file
            sharing: Sharing service used to redact MCP secrets
        """
        self.store = store or ConfigStore()
        self.codec = codec or BundleCodec()
        self.sharing = sharing or MCPSharingService(self.store)

    def export_bundle(
        self,
        project_path: Path,
        components: Iterable[ConfigBundleComponent],
        project_name: str | None = None,
        redact: bool = False,
    ) -> ConfigBundle:
        """Build a bundle from the selected components of a project.

        Args:
            project_path: Project root
            components: Components to include
            project_name: Name recorded in the bundle (defaults to the directory name)
            redact: Replace sensitive MCP env/header values with placeholders

        Raises:
            NoComponentsSelectedError: If no component is selected.
            ConfigReadError: If a selected file cannot be parsed.
        """
        selected = set(components)
        if not selected:
            raise NoComponentsSelectedError()

        bundle = ConfigBundle(project_name=project_name or project_path.name)

        if ConfigBundleComponent.SETTINGS in selected:
            bundle.settings = self.store.read_raw_config(Scope.PROJECT_SHARED, project_path)
        if ConfigBundleComponent.LOCAL_SETTINGS in selected:
            bundle.local_settings = self.store.read_raw_config(Scope.PROJECT_LOCAL, project_path)
        if ConfigBundleComponent.MCP_SERVERS in selected:
            mcp_config = self.store.read_mcp_config(project_path)
            if mcp_config is not None and redact:
                redacted = self.sharing.redact_servers(mcp_config.servers)
                mcp_config = mcp_config.with_servers(redacted)
            bundle.mcp_servers = mcp_config

        logger.info(
            f"Exported bundle for '{bundle.project_name}' with {len(selected)} component(s)"
        )
        return bundle

    def export_to_file(
        self,
        project_path: Path,
        output_path: Path,
        components: Iterable[ConfigBundleComponent],
        project_name: str | None = None,
        redact: bool = False,
    ) -> ConfigBundle:
        """Export a project and write the bundle to ``output_path``."""
        bundle = self.export_bundle(project_path, components, project_name, redact)
        self.codec.write(bundle, output_path)
        return bundle
