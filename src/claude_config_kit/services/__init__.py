"""Services for claude-config-kit.

Services hold the behavior of the kit; models hold the data. Every service
receives its collaborators (config store, codec, notifier) through its
constructor so tests can substitute them.
"""

from .bundle_codec import BundleCodec, BundleService
from .config_store import ConfigSnapshot, ConfigStore
from .conflict_detector import ConflictDetector
from .conflict_resolver import ConflictResolver
from .import_wizard import ImportWizard, LoggingNotifier, Notifier
from .mcp_copy_service import MCPServerCopyService
from .mcp_sharing_service import MCPSharingService
from .merge_engine import MergeEngine
from .permission_copy_service import PermissionCopyService
from .precedence import FIELD_POLICIES, PrecedenceRule

__all__ = [
    "BundleCodec",
    "BundleService",
    "ConfigSnapshot",
    "ConfigStore",
    "ConflictDetector",
    "ConflictResolver",
    "FIELD_POLICIES",
    "ImportWizard",
    "LoggingNotifier",
    "MCPServerCopyService",
    "MCPSharingService",
    "MergeEngine",
    "Notifier",
    "PermissionCopyService",
    "PrecedenceRule",
]
