"""Data models for claude-config-kit"""

from .bundle import ConfigBundle
from .config import ExportPreferences, ImportPreferences, KitConfig
from .effective import EffectiveConfig, EffectivePermissions, ProvenanceIndex, ScopedValue
from .enums import (
    COMPONENT_ORDER,
    ConfigBundleComponent,
    ConflictStrategy,
    CopyAction,
    FieldPolicy,
    ImportResolution,
    ImportWizardStep,
    PermissionType,
    Scope,
)
from .mcp import GlobalUserConfig, HttpServer, MCPConfig, MCPServer, StdioServer, parse_server
from .results import (
    BulkImportResult,
    CopyConflict,
    CopyDestination,
    CopyResolution,
    CopyResult,
    ImportConflict,
    ImportResult,
    SensitiveEnvWarning,
)
from .settings import (
    Attribution,
    ConfigDocument,
    HookDefinition,
    HookGroup,
    Permissions,
    RawConfig,
)

__all__ = [
    "Attribution",
    "BulkImportResult",
    "COMPONENT_ORDER",
    "ConfigBundle",
    "ConfigBundleComponent",
    "ConfigDocument",
    "ConflictStrategy",
    "CopyAction",
    "CopyConflict",
    "CopyDestination",
    "CopyResolution",
    "CopyResult",
    "EffectiveConfig",
    "EffectivePermissions",
    "ExportPreferences",
    "FieldPolicy",
    "GlobalUserConfig",
    "HookDefinition",
    "HookGroup",
    "HttpServer",
    "ImportConflict",
    "ImportPreferences",
    "ImportResolution",
    "ImportResult",
    "ImportWizardStep",
    "KitConfig",
    "MCPConfig",
    "MCPServer",
    "Permissions",
    "PermissionType",
    "ProvenanceIndex",
    "RawConfig",
    "Scope",
    "ScopedValue",
    "SensitiveEnvWarning",
    "StdioServer",
    "parse_server",
]
