"""Settings document models.

These models mirror Claude Code's ``settings.json`` schema (global,
project-shared and project-local files share one shape). Every model keeps
keys it does not know about so that documents round-trip without loss:
hook events, permission modes or whole top-level sections added by newer
Claude Code releases are written back verbatim.

Example document:

```json
{
  "permissions": {"allow": ["Bash(npm run *)"], "deny": ["Read(.env)"]},
  "env": {"CLAUDE_CODE_MAX_OUTPUT_TOKENS": "16384"},
  "hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [{"type": "command", "command": "lint"}]}]},
  "disallowedTools": ["WebFetch"],
  "attribution": {"commits": true, "pullRequests": false}
}
```
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from claude_config_kit.models.enums import PermissionType


class ConfigDocument(BaseModel):
    """Base for JSON documents owned by Claude Code.

    Unknown keys are kept as pydantic extras and emitted again on dump.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using the on-disk key names, omitting absent values."""
        result: dict[str, Any] = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return result

    @property
    def extra_keys(self) -> dict[str, Any]:
        """Keys not modeled explicitly."""
        return dict(self.model_extra or {})

    @property
    def is_empty(self) -> bool:
        """Whether the document would serialize to ``{}``."""
        return not self.to_json_dict()


class HookDefinition(ConfigDocument):
    """A single hook action, e.g. ``{"type": "command", "command": "npm run lint"}``.

    Both fields are optional so malformed entries pass through untouched.
    """

    type: str | None = None
    command: str | None = None


class HookGroup(ConfigDocument):
    """Hook definitions sharing an optional tool matcher."""

    matcher: str | None = None
    hooks: list[HookDefinition] | None = None


class Permissions(ConfigDocument):
    """Allow/deny rule lists such as ``"Bash(npm run *)"``."""

    allow: list[str] | None = None
    deny: list[str] | None = None

    def rules(self, permission_type: PermissionType) -> list[str]:
        """Return the rule list for a permission type (empty if unset)."""
        if permission_type is PermissionType.ALLOW:
            return list(self.allow or [])
        return list(self.deny or [])


class Attribution(ConfigDocument):
    """Controls attribution in commits and pull requests."""

    commits: bool | None = None
    pull_requests: bool | None = Field(default=None, alias="pullRequests")


class RawConfig(ConfigDocument):
    """One parsed settings file.

    The merge engine treats instances as read-only input; services build
    new instances with ``model_copy`` instead of mutating.
    """

    permissions: Permissions | None = None
    env: dict[str, str] | None = None
    # Event names are free-form so unknown events round-trip structurally
    hooks: dict[str, list[HookGroup]] | None = None
    disallowed_tools: list[str] | None = Field(default=None, alias="disallowedTools")
    attribution: Attribution | None = None

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> "RawConfig":
        """Validate a decoded JSON object."""
        return cls.model_validate(data)

    def hook_groups(self, event: str) -> list[HookGroup]:
        """Return hook groups for an event (empty if none)."""
        return list((self.hooks or {}).get(event, []))

    def is_tool_disallowed(self, tool_name: str) -> bool:
        """Check whether a tool is listed in ``disallowedTools``."""
        return tool_name in (self.disallowed_tools or [])

    def rules(self, permission_type: PermissionType) -> list[str]:
        """Return permission rules of a type (empty if unset)."""
        if self.permissions is None:
            return []
        return self.permissions.rules(permission_type)
