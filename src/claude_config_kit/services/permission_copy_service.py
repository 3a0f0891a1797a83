"""Copying and promoting permission rules between scopes."""

import logging
from pathlib import Path

from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.enums import PermissionType, Scope
from claude_config_kit.models.settings import Permissions, RawConfig
from claude_config_kit.services.config_store import ConfigStore

logger = logging.getLogger(__name__)


def _with_rules(config: RawConfig, permission_type: PermissionType, rules: list[str]) -> RawConfig:
    """Return ``config`` with one rule list replaced.

    An empty list is dropped, and so is a permissions block left with
    nothing in it.
    """
    permissions = config.permissions or Permissions()
    permissions = permissions.model_copy(update={permission_type.value: rules or None})
    return config.model_copy(update={"permissions": None if permissions.is_empty else permissions})


class PermissionCopyService:
    """Moves permission rules between Global, ProjectShared and ProjectLocal."""

    def __init__(self, store: ConfigStore | None = None):
        """Initialize permission copy service.

        Args:
            store: Config store for the settings files
        """
        self.store = store or ConfigStore()

    def copy_rule(
        self,
        rule: str,
        permission_type: PermissionType,
        destination: Scope,
        project_path: Path | None = None,
    ) -> bool:
        """Append a rule to a scope's list.

        Returns:
            True if the rule was added, False if it was already there

        Raises:
            ProjectPathRequiredError: If a project scope has no project path.
        """
        config = self.store.read_raw_config(destination, project_path) or RawConfig()
        rules = config.rules(permission_type)
        if rule in rules:
            logger.info(f"Rule already exists at destination: {rule}")
            return False

        rules.append(rule)
        self.store.write_raw_config(
            destination, _with_rules(config, permission_type, rules), project_path
        )
        logger.info(f"Copied rule '{rule}' to {destination.display_name}")
        return True

    def remove_rule(
        self,
        rule: str,
        permission_type: PermissionType,
        source: Scope,
        project_path: Path | None = None,
    ) -> None:
        """Remove every occurrence of a rule from a scope's list."""
        config = self.store.read_raw_config(source, project_path)
        if config is None:
            logger.debug(f"No settings file for {source.display_name}; nothing to remove")
            return
        rules = [r for r in config.rules(permission_type) if r != rule]
        self.store.write_raw_config(
            source, _with_rules(config, permission_type, rules), project_path
        )
        logger.info(f"Removed rule '{rule}' from {source.display_name}")

    def is_duplicate(
        self,
        rule: str,
        permission_type: PermissionType,
        destination: Scope,
        project_path: Path | None = None,
    ) -> bool:
        """Whether a scope already lists the rule."""
        config = self.store.read_raw_config(destination, project_path)
        return config is not None and rule in config.rules(permission_type)

    def promote_rule(
        self,
        rule: str,
        permission_type: PermissionType,
        from_scope: Scope,
        project_path: Path,
    ) -> bool:
        """Move a project rule to the global scope.

        The rule is copied first and removed from the source afterwards, so
        a failure in between leaves it defined in both places rather than
        in neither.

        Returns:
            True if the rule was newly added to Global

        Raises:
            ConfigKitError: If ``from_scope`` is already Global.
        """
        if from_scope is Scope.GLOBAL:
            raise ConfigKitError("Rule is already in the global scope", {"rule": rule})

        added = self.copy_rule(rule, permission_type, Scope.GLOBAL)
        self.remove_rule(rule, permission_type, from_scope, project_path)
        return added
