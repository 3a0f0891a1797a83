"""MCP server sharing: serialization, parsing, redaction and bulk import.

Servers are shared as ``.mcp.json``-shaped JSON. Parsing is lenient about
what users paste:

    {"mcpServers": {"github": {...}}}      full MCP config
    {"github": {...}, "jira": {...}}       flat map of servers
    {"command": "npx", "args": [...]}      a single unnamed server
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from claude_config_kit.constants import (
    COPY_SUFFIX,
    DEFAULT_SENSITIVE_REASON,
    JSON_INDENT,
    REDACTED_VALUE_TEMPLATE,
    SENSITIVE_KEY_PATTERNS,
    SENSITIVE_REASONS,
)
from claude_config_kit.exceptions import BundleFormatError, ConfigKitError
from claude_config_kit.models.enums import ConflictStrategy
from claude_config_kit.models.mcp import HttpServer, MCPConfig, StdioServer, parse_server
from claude_config_kit.models.results import BulkImportResult, CopyDestination, SensitiveEnvWarning
from claude_config_kit.services.config_store import ConfigStore

logger = logging.getLogger(__name__)

UNNAMED_SERVER_NAME = "server"

Servers = dict[str, StdioServer | HttpServer]


def is_sensitive_key(key: str) -> bool:
    """Whether an env var or header name likely holds a credential."""
    lower_key = key.lower()
    return any(pattern in lower_key for pattern in SENSITIVE_KEY_PATTERNS)


def sensitive_reason(key: str) -> str:
    """Explain why a key was flagged."""
    lower_key = key.lower()
    for patterns, reason in SENSITIVE_REASONS:
        if any(pattern in lower_key for pattern in patterns):
            return reason
    return DEFAULT_SENSITIVE_REASON


def generate_unique_name(base_name: str, existing_names: set[str]) -> str:
    """Return ``<base>-copy``, ``<base>-copy-2``, ... not in ``existing_names``."""
    candidate = f"{base_name}{COPY_SUFFIX}"
    counter = 2
    while candidate in existing_names:
        candidate = f"{base_name}{COPY_SUFFIX}-{counter}"
        counter += 1
    return candidate


def _redact_values(values: dict[str, str] | None) -> dict[str, str] | None:
    if values is None:
        return None
    return {
        key: REDACTED_VALUE_TEMPLATE.format(key=key.upper()) if is_sensitive_key(key) else value
        for key, value in values.items()
    }


def _looks_like_server(value: Any) -> bool:
    return isinstance(value, dict) and ("command" in value or "url" in value)


class MCPSharingService:
    """Shares MCP server definitions between projects and people."""

    def __init__(self, store: ConfigStore | None = None):
        """Initialize sharing service.

        Args:
            store: Config store used for bulk imports
        """
        self._store = store

    @property
    def store(self) -> ConfigStore:
        if self._store is None:
            self._store = ConfigStore()
        return self._store

    # =========================================================================
    # Serialization
    # =========================================================================

    def serialize_servers(self, servers: Servers, redact: bool = False) -> str:
        """Serialize servers as ``.mcp.json`` content."""
        final_servers = self.redact_servers(servers) if redact else servers
        config = MCPConfig(mcp_servers=final_servers)
        return json.dumps(config.to_json_dict(), indent=JSON_INDENT, sort_keys=True)

    def parse_servers(self, text: str) -> Servers:
        """Parse pasted JSON into named servers.

        Raises:
            BundleFormatError: If the text is not JSON or holds no servers.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise BundleFormatError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise BundleFormatError("No MCP servers found in the provided JSON.")

        try:
            wrapped = data.get("mcpServers")
            if isinstance(wrapped, dict) and wrapped:
                return {name: parse_server(server) for name, server in wrapped.items()}

            flat = {name: value for name, value in data.items() if _looks_like_server(value)}
            if flat:
                return {name: parse_server(server) for name, server in flat.items()}

            if _looks_like_server(data):
                return {UNNAMED_SERVER_NAME: parse_server(data)}
        except ValidationError as e:
            raise BundleFormatError(f"Invalid MCP server definition: {e}") from e

        raise BundleFormatError("No MCP servers found in the provided JSON.")

    # =========================================================================
    # Sensitive data
    # =========================================================================

    def detect_sensitive_data(self, servers: Servers) -> list[SensitiveEnvWarning]:
        """Flag env vars and headers that likely hold credentials.

        Returns:
            Warnings keyed ``<server>.<KEY>``, sorted by server then key
        """
        warnings: list[SensitiveEnvWarning] = []
        for server_name in sorted(servers):
            for key in sorted(servers[server_name].secrets):
                if is_sensitive_key(key):
                    warnings.append(
                        SensitiveEnvWarning(
                            key=f"{server_name}.{key}", reason=sensitive_reason(key)
                        )
                    )
        return warnings

    def contains_sensitive_data(self, servers: Servers) -> bool:
        return bool(self.detect_sensitive_data(servers))

    def redact_server(self, server: StdioServer | HttpServer) -> StdioServer | HttpServer:
        """Replace sensitive values with ``<YOUR_KEY>`` placeholders."""
        if isinstance(server, HttpServer):
            return server.model_copy(update={"headers": _redact_values(server.headers)})
        return server.model_copy(update={"env": _redact_values(server.env)})

    def redact_servers(self, servers: Servers) -> Servers:
        return {name: self.redact_server(server) for name, server in servers.items()}

    # =========================================================================
    # Bulk import
    # =========================================================================

    def import_servers(
        self,
        servers: Servers,
        destination: CopyDestination,
        strategy: ConflictStrategy,
    ) -> BulkImportResult:
        """Import several servers, handling name collisions by ``strategy``.

        ``prompt`` cannot ask per server here and skips collisions. Each
        server is written separately; a failed write is recorded and the
        rest continue.

        Raises:
            ConfigReadError: If the destination cannot be read.
        """
        imported: list[str] = []
        skipped: list[str] = []
        renamed: dict[str, str] = {}
        errors: list[str] = []

        all_names = set(self.store.servers_at(destination))

        for name in sorted(servers):
            server = servers[name]
            target_name = name
            if name in all_names:
                if strategy in (ConflictStrategy.SKIP, ConflictStrategy.PROMPT):
                    skipped.append(name)
                    continue
                if strategy is ConflictStrategy.RENAME:
                    target_name = generate_unique_name(name, all_names)

            try:
                self.store.put_server(target_name, server, destination)
            except ConfigKitError as e:
                logger.error(f"Failed to import MCP server '{name}': {e}")
                errors.append(f"{name}: {e}")
                continue

            if target_name != name:
                renamed[name] = target_name
            else:
                imported.append(name)
            all_names.add(target_name)

        logger.info(
            f"Bulk import: {len(imported)} imported, {len(renamed)} renamed, "
            f"{len(skipped)} skipped, {len(errors)} errors"
        )
        return BulkImportResult(imported=imported, skipped=skipped, renamed=renamed, errors=errors)
