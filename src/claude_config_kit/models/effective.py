"""Effective (merged) configuration models.

These are derived values: built fresh from the scoped settings documents on
every resolution and never persisted. All of them are immutable.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from claude_config_kit.models.enums import PermissionType, Scope
from claude_config_kit.models.settings import Attribution, HookGroup

T = TypeVar("T")


@dataclass(frozen=True)
class ScopedValue(Generic[T]):
    """A value paired with the scope it came from."""

    value: T
    source: Scope

    def as_tuple(self) -> tuple[T, Scope]:
        """Return ``(value, source)``."""
        return (self.value, self.source)


@dataclass(frozen=True)
class EffectivePermissions:
    """Deduplicated allow/deny unions, in first-seen order."""

    allow: tuple[ScopedValue[str], ...] = ()
    deny: tuple[ScopedValue[str], ...] = ()

    @property
    def allow_patterns(self) -> list[str]:
        """Allow rules without provenance."""
        return [entry.value for entry in self.allow]

    @property
    def deny_patterns(self) -> list[str]:
        """Deny rules without provenance."""
        return [entry.value for entry in self.deny]

    def entries(self, permission_type: PermissionType) -> tuple[ScopedValue[str], ...]:
        """Return the union for a permission type."""
        return self.allow if permission_type is PermissionType.ALLOW else self.deny


@dataclass(frozen=True)
class ProvenanceIndex:
    """Every scope that defined each resolved field.

    Built as a byproduct of merging. Answers "which scopes also define this
    rule" for override badges, and lists the full ``(value, scope)`` chain of
    each env var in Global -> Local order, the last entry being the winner.
    """

    rule_scopes: dict[tuple[str, PermissionType], tuple[Scope, ...]] = field(default_factory=dict)
    tool_scopes: dict[str, tuple[Scope, ...]] = field(default_factory=dict)
    env_overrides: dict[str, tuple[ScopedValue[str], ...]] = field(default_factory=dict)
    attribution_chain: tuple[ScopedValue[Attribution], ...] = ()

    def scopes_for_rule(self, rule: str, permission_type: PermissionType) -> frozenset[Scope]:
        """Return every scope defining ``rule`` in the given list."""
        return frozenset(self.rule_scopes.get((rule, permission_type), ()))

    def scopes_for_tool(self, tool_name: str) -> frozenset[Scope]:
        """Return every scope listing ``tool_name`` in ``disallowedTools``."""
        return frozenset(self.tool_scopes.get(tool_name, ()))

    def is_rule_shadowed(self, rule: str, permission_type: PermissionType, scope: Scope) -> bool:
        """Whether ``scope`` defines a rule already contributed by a less specific scope."""
        scopes = self.rule_scopes.get((rule, permission_type), ())
        return scope in scopes and scopes[0] != scope

    def env_chain(self, key: str) -> list[tuple[str, Scope]]:
        """Return ``(value, scope)`` for every scope defining ``key``, Global first."""
        return [entry.as_tuple() for entry in self.env_overrides.get(key, ())]

    def overridden_env(self, key: str) -> list[ScopedValue[str]]:
        """Return the shadowed entries for ``key`` (all but the winner)."""
        return list(self.env_overrides.get(key, ())[:-1])

    def is_env_overridden(self, key: str) -> bool:
        """Whether more than one scope defines ``key``."""
        return len(self.env_overrides.get(key, ())) > 1


@dataclass(frozen=True)
class EffectiveConfig:
    """The single resolved view of all scopes, as Claude Code applies it.

    - ``permissions`` / ``disallowed_tools``: deduplicated union, first seen wins
    - ``env`` / ``attribution``: most specific scope wins
    - ``hooks``: groups concatenated per event, Global first
    """

    permissions: EffectivePermissions = field(default_factory=EffectivePermissions)
    env: dict[str, ScopedValue[str]] = field(default_factory=dict)
    hooks: dict[str, tuple[ScopedValue[HookGroup], ...]] = field(default_factory=dict)
    disallowed_tools: tuple[ScopedValue[str], ...] = ()
    attribution: ScopedValue[Attribution] | None = None
    provenance: ProvenanceIndex = field(default_factory=ProvenanceIndex)

    @property
    def effective_env(self) -> dict[str, str]:
        """Env vars without provenance."""
        return {key: entry.value for key, entry in self.env.items()}

    @property
    def effective_disallowed_tools(self) -> list[str]:
        """Disallowed tools without provenance."""
        return [entry.value for entry in self.disallowed_tools]

    @property
    def override_set(self) -> dict[str, tuple[ScopedValue[str], ...]]:
        """Full per-key env chains, used for "overridden" rows."""
        return dict(self.provenance.env_overrides)

    @property
    def event_names(self) -> list[str]:
        """Hook events with at least one group, sorted."""
        return sorted(self.hooks)

    def hook_groups(self, event: str) -> list[ScopedValue[HookGroup]]:
        """Return the concatenated groups for an event."""
        return list(self.hooks.get(event, ()))

    def is_tool_disallowed(self, tool_name: str) -> bool:
        """Check whether any scope disallows ``tool_name``."""
        return tool_name in self.effective_disallowed_tools

    def env_source(self, key: str) -> Scope | None:
        """Return the winning scope for an env var."""
        entry = self.env.get(key)
        return entry.source if entry else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view with the source scope of every value."""

        def entry(value: Any, source: Scope) -> dict[str, Any]:
            return {"value": value, "source": source.value}

        return {
            "permissions": {
                "allow": [entry(e.value, e.source) for e in self.permissions.allow],
                "deny": [entry(e.value, e.source) for e in self.permissions.deny],
            },
            "env": {
                key: {
                    **entry(winner.value, winner.source),
                    "overridden": [
                        entry(e.value, e.source) for e in self.provenance.overridden_env(key)
                    ],
                }
                for key, winner in self.env.items()
            },
            "hooks": {
                event: [entry(e.value.to_json_dict(), e.source) for e in self.hooks[event]]
                for event in self.event_names
            },
            "disallowedTools": [entry(e.value, e.source) for e in self.disallowed_tools],
            "attribution": (
                entry(self.attribution.value.to_json_dict(), self.attribution.source)
                if self.attribution
                else None
            ),
        }
