"""Copying single MCP servers between projects and the global config."""

import logging

from claude_config_kit.config.messages import COPY_MESSAGES
from claude_config_kit.exceptions import DuplicateNameError, InvalidNameError
from claude_config_kit.models.enums import ConflictStrategy, CopyAction
from claude_config_kit.models.mcp import HttpServer, StdioServer
from claude_config_kit.models.results import (
    CopyConflict,
    CopyDestination,
    CopyResolution,
    CopyResult,
    SensitiveEnvWarning,
)
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.mcp_sharing_service import (
    generate_unique_name,
    is_sensitive_key,
    sensitive_reason,
)

logger = logging.getLogger(__name__)


class MCPServerCopyService:
    """Copies one named MCP server to a destination.

    Name collisions are either handled by an up-front ConflictStrategy
    (``copy_server``) or by an explicit per-conflict CopyResolution
    (``copy_server_with_resolution``).
    """

    def __init__(self, store: ConfigStore | None = None):
        """Initialize copy service.

        Args:
            store: Config store for the source and destination files
        """
        self.store = store or ConfigStore()

    def find_server(self, name: str, source: CopyDestination) -> StdioServer | HttpServer | None:
        """Look up a server by name at a source location."""
        return self.store.servers_at(source).get(name)

    def check_conflict(
        self,
        server_name: str,
        server: StdioServer | HttpServer,
        destination: CopyDestination,
    ) -> CopyConflict | None:
        """Return a conflict if ``server_name`` already exists at the destination."""
        existing = self.store.servers_at(destination).get(server_name)
        if existing is None:
            return None
        return CopyConflict(
            server_name=server_name,
            existing_server=existing,
            new_server=server,
            destination=destination,
        )

    def detect_sensitive_env_vars(
        self, server: StdioServer | HttpServer
    ) -> list[SensitiveEnvWarning]:
        """Flag the server's own env vars or headers that look like credentials."""
        return [
            SensitiveEnvWarning(key=key, reason=sensitive_reason(key))
            for key in sorted(server.secrets)
            if is_sensitive_key(key)
        ]

    def copy_server(
        self,
        name: str,
        server: StdioServer | HttpServer,
        destination: CopyDestination,
        strategy: ConflictStrategy = ConflictStrategy.PROMPT,
    ) -> CopyResult:
        """Copy a server, handling a name collision by ``strategy``.

        With ``prompt`` a collision is reported in an unsuccessful result so
        the caller can ask and retry via copy_server_with_resolution.

        Raises:
            ConfigReadError: If the destination cannot be read.
            ConfigWriteError: If the destination cannot be written.
        """
        conflict = self.check_conflict(name, server, destination)
        if conflict is None or strategy is ConflictStrategy.OVERWRITE:
            return self._perform_copy(name, server, destination)

        if strategy is ConflictStrategy.SKIP:
            return CopyResult(
                server_name=name,
                destination=destination,
                success=False,
                message=COPY_MESSAGES["skipped_exists"],
            )

        if strategy is ConflictStrategy.RENAME:
            new_name = generate_unique_name(name, set(self.store.servers_at(destination)))
            return self._perform_copy(new_name, server, destination, original_name=name)

        return CopyResult(
            server_name=name,
            destination=destination,
            success=False,
            message=COPY_MESSAGES["conflict"].format(name=conflict.server_name),
        )

    def copy_server_with_resolution(
        self,
        name: str,
        server: StdioServer | HttpServer,
        destination: CopyDestination,
        resolution: CopyResolution,
    ) -> CopyResult:
        """Copy a server applying an explicit conflict resolution.

        Raises:
            InvalidNameError: If a rename target is empty.
            DuplicateNameError: If a rename target already exists at the
                destination. Nothing is written in either case.
        """
        if resolution.action is CopyAction.SKIP:
            return CopyResult(
                server_name=name,
                destination=destination,
                success=False,
                message=COPY_MESSAGES["skipped_by_user"],
            )

        if resolution.action is CopyAction.OVERWRITE:
            return self._perform_copy(name, server, destination)

        new_name = (resolution.new_name or "").strip()
        if not new_name:
            raise InvalidNameError("New server name cannot be empty")
        if new_name in self.store.servers_at(destination):
            raise DuplicateNameError(new_name, destination.display_name)
        return self._perform_copy(new_name, server, destination, original_name=name)

    def _perform_copy(
        self,
        name: str,
        server: StdioServer | HttpServer,
        destination: CopyDestination,
        original_name: str | None = None,
    ) -> CopyResult:
        self.store.put_server(name, server, destination)

        if original_name is not None:
            logger.info(
                f"Copied MCP server '{original_name}' as '{name}' to {destination.display_name}"
            )
            return CopyResult(
                server_name=original_name,
                destination=destination,
                success=True,
                message=COPY_MESSAGES["copied_renamed"].format(original=original_name, name=name),
                renamed=True,
                new_name=name,
            )

        logger.info(f"Copied MCP server '{name}' to {destination.display_name}")
        return CopyResult(
            server_name=name,
            destination=destination,
            success=True,
            message=COPY_MESSAGES["copied"].format(name=name),
        )
