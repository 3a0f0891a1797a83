"""Merge engine: resolves scoped settings into one effective configuration.

Each settings field combines across scopes according to its policy:

    permissions.allow / deny, disallowedTools  union, first occurrence wins
    env, attribution                           override, most specific wins
    hooks                                      concatenation, Global first

Provenance (every scope that defined each rule, tool and env key) is
collected in the same passes, so explaining a resolved value never needs a
second walk over the inputs.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from claude_config_kit.models.effective import (
    EffectiveConfig,
    EffectivePermissions,
    ProvenanceIndex,
    ScopedValue,
)
from claude_config_kit.models.enums import PermissionType, Scope
from claude_config_kit.models.settings import Attribution, HookGroup, RawConfig
from claude_config_kit.services.config_store import ConfigStore
from claude_config_kit.services.precedence import DEFAULT_PRECEDENCE, PrecedenceRule

logger = logging.getLogger(__name__)


class _UnionAccumulator:
    """Deduplicated, order-preserving union that remembers every contributing scope."""

    def __init__(self) -> None:
        self.entries: list[ScopedValue[str]] = []
        self.scopes: dict[str, list[Scope]] = {}

    def add(self, value: str, scope: Scope) -> None:
        seen = self.scopes.get(value)
        if seen is None:
            self.entries.append(ScopedValue(value, scope))
            self.scopes[value] = [scope]
        elif scope not in seen:
            seen.append(scope)


class MergeEngine:
    """Resolves Global, ProjectShared and ProjectLocal settings.

    ``resolve`` is pure: it never touches disk, never fails, and returns a
    new immutable EffectiveConfig. The store is only used by the
    convenience loaders.
    """

    def __init__(
        self,
        store: ConfigStore | None = None,
        precedence: PrecedenceRule = DEFAULT_PRECEDENCE,
    ):
        """Initialize merge engine.

        Args:
            store: Config store used by resolve_project (created on demand)
            precedence: Scope ordering
        """
        self._store = store
        self.precedence = precedence

    @property
    def store(self) -> ConfigStore:
        if self._store is None:
            self._store = ConfigStore()
        return self._store

    def resolve(
        self,
        global_config: RawConfig | None = None,
        project_shared: RawConfig | None = None,
        project_local: RawConfig | None = None,
    ) -> EffectiveConfig:
        """Merge the three scopes; an absent scope contributes nothing."""
        return self.resolve_scoped(
            {
                Scope.GLOBAL: global_config,
                Scope.PROJECT_SHARED: project_shared,
                Scope.PROJECT_LOCAL: project_local,
            }
        )

    def resolve_scoped(self, documents: Mapping[Scope, RawConfig | None]) -> EffectiveConfig:
        """Merge documents keyed by scope."""
        allow = _UnionAccumulator()
        deny = _UnionAccumulator()
        tools = _UnionAccumulator()
        env: dict[str, ScopedValue[str]] = {}
        env_chains: dict[str, list[ScopedValue[str]]] = {}
        hooks: dict[str, list[ScopedValue[HookGroup]]] = {}
        attribution: ScopedValue[Attribution] | None = None
        attribution_chain: list[ScopedValue[Attribution]] = []

        for scope, config in self.precedence.ordered(documents):
            for rule in config.rules(PermissionType.ALLOW):
                allow.add(rule, scope)
            for rule in config.rules(PermissionType.DENY):
                deny.add(rule, scope)
            for tool in config.disallowed_tools or []:
                tools.add(tool, scope)

            for key, value in (config.env or {}).items():
                entry = ScopedValue(value, scope)
                env[key] = entry
                env_chains.setdefault(key, []).append(entry)

            if config.attribution is not None and not config.attribution.is_empty:
                attribution = ScopedValue(config.attribution, scope)
                attribution_chain.append(attribution)

            for event, groups in (config.hooks or {}).items():
                event_groups = hooks.setdefault(event, [])
                event_groups.extend(ScopedValue(group, scope) for group in groups)

        rule_scopes: dict[tuple[str, PermissionType], tuple[Scope, ...]] = {}
        for permission_type, accumulator in (
            (PermissionType.ALLOW, allow),
            (PermissionType.DENY, deny),
        ):
            for rule, scopes in accumulator.scopes.items():
                rule_scopes[(rule, permission_type)] = tuple(scopes)

        provenance = ProvenanceIndex(
            rule_scopes=rule_scopes,
            tool_scopes={tool: tuple(scopes) for tool, scopes in tools.scopes.items()},
            env_overrides={key: tuple(chain) for key, chain in env_chains.items()},
            attribution_chain=tuple(attribution_chain),
        )

        effective = EffectiveConfig(
            permissions=EffectivePermissions(allow=tuple(allow.entries), deny=tuple(deny.entries)),
            env=env,
            hooks={event: tuple(groups) for event, groups in hooks.items()},
            disallowed_tools=tuple(tools.entries),
            attribution=attribution,
            provenance=provenance,
        )
        logger.debug(
            f"Resolved {len(allow.entries)} allow, {len(deny.entries)} deny rules, "
            f"{len(env)} env vars, {len(hooks)} hook events"
        )
        return effective

    def resolve_project(self, project_path: Path) -> EffectiveConfig:
        """Read a project's three settings scopes and merge them.

        Only the settings files are read; ``.mcp.json`` plays no part in
        effective settings.

        Raises:
            ConfigReadError: If any existing settings file cannot be parsed.
        """
        return self.resolve(
            self.store.read_raw_config(Scope.GLOBAL),
            self.store.read_raw_config(Scope.PROJECT_SHARED, project_path),
            self.store.read_raw_config(Scope.PROJECT_LOCAL, project_path),
        )
