"""Configuration bundle model.

A bundle carries a subset of one project's configuration to another
project or machine:

```json
{
  "version": 1,
  "exportedAt": "2024-01-15T10:30:00Z",
  "projectName": "my-project",
  "settings": { ... },
  "localSettings": { ... },
  "mcpServers": {"mcpServers": { ... }}
}
```
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from claude_config_kit.constants import BUNDLE_FORMAT_VERSION
from claude_config_kit.models.enums import COMPONENT_ORDER, ConfigBundleComponent
from claude_config_kit.models.mcp import MCPConfig, StdioServer
from claude_config_kit.models.settings import ConfigDocument, RawConfig


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ConfigBundle(BaseModel):
    """Exported project configuration."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = BUNDLE_FORMAT_VERSION
    exported_at: datetime = Field(default_factory=_utc_now, alias="exportedAt")
    project_name: str = Field(alias="projectName")
    settings: RawConfig | None = None
    local_settings: RawConfig | None = Field(default=None, alias="localSettings")
    mcp_servers: MCPConfig | None = Field(default=None, alias="mcpServers")

    def payload(self, component: ConfigBundleComponent) -> ConfigDocument | None:
        """Return the document carried for a component."""
        if component is ConfigBundleComponent.SETTINGS:
            return self.settings
        if component is ConfigBundleComponent.LOCAL_SETTINGS:
            return self.local_settings
        return self.mcp_servers

    @property
    def is_empty(self) -> bool:
        """Whether the bundle carries no component at all."""
        return all(self.payload(component) is None for component in COMPONENT_ORDER)

    @property
    def available_components(self) -> list[ConfigBundleComponent]:
        """Components present in the bundle, in processing order."""
        return [c for c in COMPONENT_ORDER if self.payload(c) is not None]

    @property
    def contains_sensitive_data(self) -> bool:
        """Whether the bundle likely contains secrets.

        Local settings are always treated as sensitive, as is any stdio
        server that sets environment variables.
        """
        if self.local_settings is not None:
            return True
        if self.mcp_servers is not None:
            for server in self.mcp_servers.servers.values():
                if isinstance(server, StdioServer) and server.env:
                    return True
        return False

    @property
    def content_summary(self) -> list[str]:
        """One line per component describing what it carries."""
        summary: list[str] = []
        if self.settings is not None:
            summary.append(_settings_summary("Settings", self.settings))
        if self.local_settings is not None:
            summary.append(_settings_summary("Local Settings", self.local_settings))
        if self.mcp_servers is not None and self.mcp_servers.servers:
            summary.append(f"MCP Servers: {len(self.mcp_servers.servers)}")
        return summary


def _settings_summary(title: str, settings: RawConfig) -> str:
    items: list[str] = []
    if settings.permissions is not None:
        allow_count = len(settings.permissions.allow or [])
        deny_count = len(settings.permissions.deny or [])
        if allow_count or deny_count:
            items.append(f"{allow_count} allow, {deny_count} deny rules")
    if settings.env:
        items.append(f"{len(settings.env)} env vars")
    if settings.hooks is not None:
        items.append("hooks")
    if not items:
        return f"{title} (empty)"
    return f"{title}: {', '.join(items)}"
