"""Runtime configuration settings for claude-config-kit.

This module uses Pydantic Settings for values that can be overridden via
environment variables with the CCK_ prefix. Each ConfigStore reads a fresh
instance unless one is passed in.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Config store settings.

    Can be overridden via environment variables with the CCK_ prefix,
    e.g. ``CCK_HOME_DIR=/tmp/home`` or ``CCK_CREATE_BACKUPS=false``.
    """

    model_config = SettingsConfigDict(env_prefix="CCK_")

    home_dir: Path = Field(
        default_factory=Path.home,
        description="Home directory used to locate ~/.claude and ~/.claude.json",
    )
    create_backups: bool = Field(
        default=True,
        description="Write a timestamped backup before overwriting a config file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level applied by the command line entry point",
    )

