"""Import wizard state machine.

Steps::

    SELECT_FILE -> SELECT_COMPONENTS -> [RESOLVE_CONFLICTS] -> PREVIEW -> COMPLETE

RESOLVE_CONFLICTS is only entered when conflicts were detected; going back
from PREVIEW skips it in the same case. Every forward transition is gated
by ``can_proceed``, and leaving PREVIEW runs the import exactly once.

The wizard holds no UI: a presentation layer reads its state after each
call and renders it.
"""

import logging
from pathlib import Path
from typing import Protocol

from claude_config_kit.exceptions import ConfigKitError
from claude_config_kit.models.bundle import ConfigBundle
from claude_config_kit.models.enums import (
    ConfigBundleComponent,
    ImportResolution,
    ImportWizardStep,
)
from claude_config_kit.models.results import ImportConflict, ImportResult
from claude_config_kit.models.settings import ConfigDocument
from claude_config_kit.services.bundle_codec import BundleCodec
from claude_config_kit.services.config_store import ConfigSnapshot, ConfigStore
from claude_config_kit.services.conflict_detector import ConflictDetector
from claude_config_kit.services.conflict_resolver import ConflictResolver

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Sink for user-facing notifications."""

    def success(self, title: str, message: str) -> None: ...

    def warning(self, title: str, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes to the module logger."""

    def success(self, title: str, message: str) -> None:
        logger.info(f"{title}: {message}")

    def warning(self, title: str, message: str) -> None:
        logger.warning(f"{title}: {message}")

    def error(self, title: str, message: str) -> None:
        logger.error(f"{title}: {message}")


class ImportWizard:
    """Drives a bundle import into one project."""

    def __init__(
        self,
        project_path: Path,
        store: ConfigStore | None = None,
        codec: BundleCodec | None = None,
        detector: ConflictDetector | None = None,
        resolver: ConflictResolver | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize import wizard.

        Args:
            project_path: Project to import into
            store: Config store for the project files
            codec: Codec used to decode bundles
            detector: Conflict detector
            resolver: Conflict resolver that applies the import
            notifier: Notification sink (logs by default)
        """
        self.project_path = project_path
        self.store = store or ConfigStore()
        self.codec = codec or BundleCodec()
        self.detector = detector or ConflictDetector(self.store)
        self.resolver = resolver or ConflictResolver(self.store, self.detector)
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.reset()

    def reset(self) -> None:
        """Return to the first step and forget everything selected."""
        self.current_step = ImportWizardStep.SELECT_FILE
        self.bundle: ConfigBundle | None = None
        self.source_path: Path | None = None
        self.selected_components: set[ConfigBundleComponent] = set()
        self.conflicts: list[ImportConflict] = []
        self.resolutions: dict[ConfigBundleComponent, ImportResolution] = {}
        self.acknowledged_sensitive_data = False
        self.error_message: str | None = None
        self.import_result: ImportResult | None = None
        self.snapshot: ConfigSnapshot | None = None
        self._import_attempted = False

    # =========================================================================
    # Bundle loading
    # =========================================================================

    def load_bundle(self, data: bytes | str, source_path: Path | None = None) -> bool:
        """Decode a bundle and pre-select all of its components.

        Returns:
            True on success; on failure ``error_message`` is set
        """
        self.error_message = None
        try:
            bundle = self.codec.decode(data)
        except ConfigKitError as e:
            logger.warning(f"Could not load bundle: {e}")
            self.error_message = str(e)
            self.bundle = None
            self.source_path = None
            return False

        self.bundle = bundle
        self.source_path = source_path
        self.selected_components = set(bundle.available_components)
        return True

    def load_bundle_file(self, path: Path) -> bool:
        """Read and decode a bundle file."""
        try:
            data = path.read_bytes()
        except OSError as e:
            self.error_message = f"Failed to read bundle: {e}"
            self.bundle = None
            self.source_path = None
            return False
        return self.load_bundle(data, path)

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def available_components(self) -> list[ConfigBundleComponent]:
        return self.bundle.available_components if self.bundle else []

    @property
    def has_sensitive_data(self) -> bool:
        return self.bundle.contains_sensitive_data if self.bundle else False

    @property
    def unresolved_conflicts(self) -> list[ImportConflict]:
        return [c for c in self.conflicts if c.component not in self.resolutions]

    @property
    def can_proceed(self) -> bool:
        """Whether ``next_step`` would advance from the current step."""
        step = self.current_step
        if step is ImportWizardStep.SELECT_FILE:
            return self.bundle is not None
        if step is ImportWizardStep.SELECT_COMPONENTS:
            if self.bundle is None or not self.selected_components:
                return False
            if (
                ConfigBundleComponent.LOCAL_SETTINGS in self.selected_components
                and not self.acknowledged_sensitive_data
            ):
                return False
            return True
        if step is ImportWizardStep.RESOLVE_CONFLICTS:
            return not self.unresolved_conflicts
        if step is ImportWizardStep.PREVIEW:
            return True
        return False

    @property
    def can_go_back(self) -> bool:
        return self.current_step not in (ImportWizardStep.SELECT_FILE, ImportWizardStep.COMPLETE)

    # =========================================================================
    # Choices
    # =========================================================================

    def set_resolution(
        self, component: ConfigBundleComponent, resolution: ImportResolution
    ) -> None:
        """Choose how a conflicting component is resolved."""
        self.resolutions[component] = resolution

    def preview(self) -> dict[ConfigBundleComponent, ConfigDocument | None]:
        """Return the documents the import would write (None for skipped)."""
        if self.bundle is None or self.snapshot is None:
            return {}
        return self.resolver.plan(
            self.bundle, self.snapshot, self.selected_components, self.resolutions
        )

    # =========================================================================
    # Navigation
    # =========================================================================

    def next_step(self) -> bool:
        """Advance if the current step allows it.

        Returns:
            True if the step changed
        """
        if not self.can_proceed:
            return False

        step = self.current_step
        if step is ImportWizardStep.SELECT_FILE:
            self.current_step = ImportWizardStep.SELECT_COMPONENTS
        elif step is ImportWizardStep.SELECT_COMPONENTS:
            if not self._detect_conflicts():
                return False
            self.current_step = (
                ImportWizardStep.RESOLVE_CONFLICTS if self.conflicts else ImportWizardStep.PREVIEW
            )
        elif step is ImportWizardStep.RESOLVE_CONFLICTS:
            self.current_step = ImportWizardStep.PREVIEW
        elif step is ImportWizardStep.PREVIEW:
            self._perform_import()
            self.current_step = ImportWizardStep.COMPLETE
        return True

    def previous_step(self) -> bool:
        """Go back one step, skipping conflict resolution when there was none.

        Returns:
            True if the step changed
        """
        if not self.can_go_back:
            return False

        step = self.current_step
        if step is ImportWizardStep.SELECT_COMPONENTS:
            self.current_step = ImportWizardStep.SELECT_FILE
        elif step is ImportWizardStep.RESOLVE_CONFLICTS:
            self.current_step = ImportWizardStep.SELECT_COMPONENTS
        elif step is ImportWizardStep.PREVIEW:
            self.current_step = (
                ImportWizardStep.RESOLVE_CONFLICTS
                if self.conflicts
                else ImportWizardStep.SELECT_COMPONENTS
            )
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _detect_conflicts(self) -> bool:
        if self.bundle is None:
            return False
        self.error_message = None
        try:
            self.snapshot = self.store.snapshot(self.project_path)
        except ConfigKitError as e:
            logger.warning(f"Could not read target project: {e}")
            self.error_message = str(e)
            return False

        self.conflicts = self.detector.detect(self.bundle, self.snapshot, self.selected_components)
        # Resolutions for components that no longer conflict are dropped
        conflicting = {c.component for c in self.conflicts}
        self.resolutions = {c: r for c, r in self.resolutions.items() if c in conflicting}
        return True

    def _perform_import(self) -> None:
        if self._import_attempted or self.bundle is None:
            return
        self._import_attempted = True
        self.error_message = None

        try:
            result = self.resolver.resolve(
                self.bundle,
                self.project_path,
                self.selected_components,
                self.resolutions,
                conflicts=self.conflicts,
                snapshot=self.snapshot,
            )
        except ConfigKitError as e:
            logger.error(f"Import failed: {e}")
            self.error_message = str(e)
            self.notifier.error("Import failed", str(e))
            return

        self.import_result = result
        if result.success:
            self.notifier.success("Import successful", result.message)
        elif result.errors:
            self.notifier.warning(result.message, result.errors[0])
