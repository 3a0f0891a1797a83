"""User preference models for claude-config-kit."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from claude_config_kit.models.enums import ConfigBundleComponent, ImportResolution

logger = logging.getLogger(__name__)


class ExportPreferences(BaseModel):
    """Defaults for ``cck export``."""

    redact_sensitive: bool = Field(
        default=True,
        description="Replace sensitive MCP env/header values with placeholders",
    )
    components: list[ConfigBundleComponent] = Field(
        default_factory=lambda: [
            ConfigBundleComponent.SETTINGS,
            ConfigBundleComponent.MCP_SERVERS,
        ],
        description="Components exported when none are given on the command line",
    )


class ImportPreferences(BaseModel):
    """Defaults for ``cck import``."""

    default_resolution: ImportResolution | None = Field(
        default=None,
        description="Resolution applied to conflicts not resolved explicitly (unset = ask)",
    )


class KitConfig(BaseModel):
    """Main claude-config-kit preferences file."""

    version: str = Field(default="1", description="Preferences file version")
    export: ExportPreferences = Field(default_factory=ExportPreferences)
    import_: ImportPreferences = Field(default_factory=ImportPreferences, alias="import")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def load(cls, config_path: Path) -> "KitConfig":
        """Load preferences from file.

        A missing or empty file yields defaults, as does a malformed one
        (logged as a warning).
        """
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read preferences {config_path}: {e}")
            return cls()

        if not data:
            return cls()

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid preferences in {config_path}, using defaults: {e}")
            return cls()

    def save(self, config_path: Path) -> None:
        """Save preferences to file."""

        # Keep short lists inline
        class InlineListDumper(yaml.SafeDumper):
            pass

        def represent_list(dumper: yaml.SafeDumper, data: list[Any]) -> yaml.nodes.Node:
            if len(data) <= 3:
                return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)
            return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=False)

        InlineListDumper.add_representer(list, represent_list)

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json", by_alias=True, exclude_none=True),
                f,
                Dumper=InlineListDumper,
                default_flow_style=False,
                sort_keys=False,
            )
