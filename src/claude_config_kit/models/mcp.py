"""MCP server configuration models.

A server is either stdio-based (a command to spawn) or HTTP-based (a URL to
call). The two shapes are modeled as separate classes joined in a tagged
union, so code handling a server matches on the concrete type instead of
probing optional attributes.

Stdio server::

    {"command": "npx", "args": ["-y", "@modelcontextprotocol/server-github"],
     "env": {"GITHUB_TOKEN": "..."}}

HTTP server::

    {"type": "http", "url": "https://mcp.example.com/api",
     "headers": {"Authorization": "Bearer ..."}}
"""

from typing import Annotated, Any, Literal

from pydantic import Discriminator, Field, Tag, TypeAdapter

from claude_config_kit.models.settings import ConfigDocument

HTTP_TRANSPORTS = ("http", "sse")


class StdioServer(ConfigDocument):
    """MCP server launched as a subprocess speaking over stdio."""

    type: str | None = None
    command: str
    args: list[str] | None = None
    env: dict[str, str] | None = None

    @property
    def secrets(self) -> dict[str, str]:
        """Values that may carry credentials."""
        return dict(self.env or {})


class HttpServer(ConfigDocument):
    """MCP server reached over HTTP (or SSE)."""

    type: Literal["http", "sse"] = "http"
    url: str
    headers: dict[str, str] | None = None

    @property
    def secrets(self) -> dict[str, str]:
        """Values that may carry credentials."""
        return dict(self.headers or {})


def _server_kind(value: Any) -> str:
    """Pick the union member for raw JSON or an already-built model."""
    if isinstance(value, HttpServer):
        return "http"
    if isinstance(value, StdioServer):
        return "stdio"
    if isinstance(value, dict):
        if value.get("type") in HTTP_TRANSPORTS:
            return "http"
        if "url" in value and "command" not in value:
            return "http"
    return "stdio"


MCPServer = Annotated[
    Annotated[StdioServer, Tag("stdio")] | Annotated[HttpServer, Tag("http")],
    Discriminator(_server_kind),
]

_server_adapter: TypeAdapter[StdioServer | HttpServer] = TypeAdapter(MCPServer)


def parse_server(data: Any) -> StdioServer | HttpServer:
    """Validate a single server definition.

    Raises:
        pydantic.ValidationError: If the data matches neither server shape.
    """
    return _server_adapter.validate_python(data)


class MCPConfig(ConfigDocument):
    """Project MCP file (``.mcp.json``): servers keyed by name."""

    mcp_servers: dict[str, MCPServer] | None = Field(default=None, alias="mcpServers")

    @property
    def servers(self) -> dict[str, StdioServer | HttpServer]:
        """Servers keyed by name (empty if unset)."""
        return dict(self.mcp_servers or {})

    @property
    def server_names(self) -> list[str]:
        """Sorted server names."""
        return sorted(self.servers)

    def server(self, name: str) -> StdioServer | HttpServer | None:
        """Return the server with the given name, if present."""
        return self.servers.get(name)

    def with_servers(self, servers: dict[str, StdioServer | HttpServer]) -> "MCPConfig":
        """Return a copy holding ``servers``, keeping any other top-level keys."""
        return self.model_copy(update={"mcp_servers": dict(servers)})


class GlobalUserConfig(ConfigDocument):
    """The user's ``~/.claude.json``.

    Only ``mcpServers`` is modeled; project history, preferences and every
    other key are preserved as extras.
    """

    mcp_servers: dict[str, MCPServer] | None = Field(default=None, alias="mcpServers")

    @property
    def servers(self) -> dict[str, StdioServer | HttpServer]:
        """Global servers keyed by name (empty if unset)."""
        return dict(self.mcp_servers or {})

    def with_servers(self, servers: dict[str, StdioServer | HttpServer]) -> "GlobalUserConfig":
        """Return a copy holding ``servers``, keeping every other key."""
        return self.model_copy(update={"mcp_servers": dict(servers)})
