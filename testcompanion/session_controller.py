"""
SessionController - owns the live session and routes every user intent.

UI code calls the setters and commands here; nothing else mutates the
session. Every mutation runs the registered mutation hooks and restarts
the debounced auto-save timer.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from .area import AreaNode, CascadingSelector, load_taxonomy
from .autosave import AutoSaveService
from .config import AppSettings, coverage_candidates
from .duration_tracker import DurationTracker
from .formatting import DurationCategory, format_start_time
from .report import ExportFormat, ReportImportError, import_report_file, render_report
from .scheduler import Clock, Scheduler, SystemClock
from .session_schema import BugEntry, IssueEntry, SessionModel
from .validation import ValidationResult, task_breakdown_error, validate_session

logger = logging.getLogger(__name__)

DURATION_TICK_SECONDS = 1.0
AUTO_SAVE_DELAY_SECONDS = 2.0

IMPORT_FAILED_MESSAGE = (
    "The selected file could not be parsed. "
    "Only JSON reports exported by Test Companion are supported."
)

_BUG_FIELDS = {"title", "description", "result", "expected_result", "related_files"}
_ISSUE_FIELDS = {"title", "description"}
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

MutationHook = Callable[[SessionModel], None]


class ReadOnlySessionError(RuntimeError):
    """Raised when a mutation is attempted on a read-only session."""


def sanitize_filename(title: str) -> str:
    """Replace characters not allowed in file names with underscores."""
    return _INVALID_FILENAME_CHARS.sub("_", title)


def build_report_filename(title: str, export_format: ExportFormat, local_now: datetime) -> str:
    """``Session_<title>_<YYYYmmdd_HHMMSS><ext>``"""
    stamp = local_now.strftime("%Y%m%d_%H%M%S")
    return f"Session_{sanitize_filename(title)}_{stamp}{export_format.extension}"


class SessionController:
    """
    Single owner of the in-progress testing session.

    Wires the session to the cascading area selector, the duration
    tracker, the auto-save cache and the report engine. Runs on one thread;
    the two timers are driven by the injected Scheduler.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
        autosave: AutoSaveService | None = None,
        settings: AppSettings | None = None,
        settings_path: Path | None = None,
    ):
        """
        Initialize controller.

        Args:
            clock: Time source (default: system clock)
            scheduler: Timer scheduler (default: one built on ``clock``)
            autosave: Crash-recovery cache (default: app data dir)
            settings: Settings to use (default: loaded from ``settings_path``)
            settings_path: Where settings are loaded from and saved to
        """
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or Scheduler(self.clock)
        self.autosave = autosave or AutoSaveService()
        self.settings_path = settings_path
        self.settings = settings or AppSettings.load(settings_path)

        self._model = self._new_model()
        self._selector = CascadingSelector([])
        self._tracker = DurationTracker(self.clock)
        self._mutation_hooks: list[MutationHook] = []

        self._duration_timer = self.scheduler.create_timer(DURATION_TICK_SECONDS, self._on_duration_tick)
        self._autosave_timer = self.scheduler.create_timer(
            AUTO_SAVE_DELAY_SECONDS, self._on_autosave_due, repeat=False
        )

        self.status_message = ""
        self.validation_message = ""
        self.has_validation_error = False
        self.is_read_only = False
        self.opened_file_path = ""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, roots: list[AreaNode] | None = None) -> bool:
        """
        Load the taxonomy, restore the cached session or start a new one,
        and start the duration tick.

        Args:
            roots: Taxonomy to use instead of loading coverage files

        Returns:
            True if a cached session was restored
        """
        if roots is None:
            roots = load_taxonomy(coverage_candidates(self.settings))
        self._selector = CascadingSelector(roots)
        self._selector.add_listener(self._on_area_changed)

        cached = self.autosave.load()
        if cached is not None:
            logger.info("Restoring session from cache")
            self._restore(cached)
        else:
            self._model = self._new_model()
            self._tracker.reset()

        self._duration_timer.start()
        return cached is not None

    def _new_model(self) -> SessionModel:
        return SessionModel(
            start_time=format_start_time(self.clock.local_now()),
            start_time_utc=self.clock.now(),
        )

    def _restore(self, model: SessionModel) -> None:
        """Install a session without firing selection listeners or saves."""
        self._model = model.model_copy(deep=True)
        self._selector.restore(self._model.area_selections)
        self._model.area_selections = self._selector.get_selections()
        self._tracker.load(self._model.accumulated_duration)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def model(self) -> SessionModel:
        """The live session. Mutate it only through this controller."""
        return self._model

    @property
    def selector(self) -> CascadingSelector:
        return self._selector

    @property
    def tracker(self) -> DurationTracker:
        return self._tracker

    @property
    def duration_display(self) -> str:
        return self._tracker.display

    @property
    def duration_category(self) -> DurationCategory:
        return self._tracker.category

    @property
    def task_breakdown_error(self) -> str:
        return task_breakdown_error(self._model)

    def add_mutation_hook(self, hook: MutationHook) -> None:
        """Register a callback run after every session mutation."""
        self._mutation_hooks.append(hook)

    # ------------------------------------------------------------------
    # Mutation entry points
    # ------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self.is_read_only:
            raise ReadOnlySessionError("Session is read-only; enable editing first")

    def _mutated(self) -> None:
        for hook in self._mutation_hooks:
            hook(self._model)
        self.schedule_auto_save()

    def set_title(self, title: str) -> None:
        self._ensure_editable()
        self._model.title = title
        self._mutated()

    def set_tester_names(self, names: str) -> None:
        self._ensure_editable()
        self._model.tester_names = names
        self._mutated()

    def set_test_notes(self, notes: str) -> None:
        self._ensure_editable()
        self._model.test_notes = notes
        self._mutated()

    def set_session_setup_percent(self, value: float) -> None:
        self._ensure_editable()
        self._model.set_session_setup_percent(value)
        self._mutated()

    def set_test_design_execution_percent(self, value: float) -> None:
        self._ensure_editable()
        self._model.set_test_design_execution_percent(value)
        self._mutated()

    def set_bug_investigation_percent(self, value: float) -> None:
        self._ensure_editable()
        self._model.set_bug_investigation_percent(value)
        self._mutated()

    def set_charter_percent(self, value: float) -> None:
        self._ensure_editable()
        self._model.set_charter_percent(value)
        self._mutated()

    def set_opportunity_percent(self, value: float) -> None:
        self._ensure_editable()
        self._model.set_opportunity_percent(value)
        self._mutated()

    # Areas

    def select_area(self, level_index: int, name: str | None) -> list[str]:
        """
        Pick an area by name at a level, or clear the level with None.

        Returns:
            The selection path after cascading
        """
        self._ensure_editable()
        if name is None:
            self._selector.select(level_index, None)
        else:
            self._selector.select_by_name(level_index, name)
        return list(self._model.area_selections)

    def _on_area_changed(self, selector: CascadingSelector) -> None:
        self._model.area_selections = selector.get_selections()
        self._mutated()

    # Files

    def add_files(self, paths: list[str]) -> list[str]:
        """Attach files from a picker or drop; duplicates are skipped."""
        self._ensure_editable()
        added = self._model.add_files(list(paths))
        self._mutated()
        return added

    def remove_file(self, path: str) -> bool:
        self._ensure_editable()
        removed = self._model.remove_file(path)
        if removed:
            self._mutated()
        return removed

    # Bugs and issues

    def add_bug(self) -> int:
        """Append an empty bug and return its index."""
        self._ensure_editable()
        self._model.add_bug(BugEntry())
        self._mutated()
        return len(self._model.bugs) - 1

    def update_bug(self, index: int, **changes) -> BugEntry:
        """Edit fields of the bug at ``index``."""
        self._ensure_editable()
        unknown = set(changes) - _BUG_FIELDS
        if unknown:
            raise ValueError(f"Unknown bug fields: {sorted(unknown)}")
        bug = self._model.bugs[index]
        for name, value in changes.items():
            setattr(bug, name, list(value) if name == "related_files" else value)
        self._mutated()
        return bug

    def remove_bug(self, index: int) -> BugEntry:
        self._ensure_editable()
        bug = self._model.remove_bug(index)
        self._mutated()
        return bug

    def add_issue(self) -> int:
        """Append an empty issue and return its index."""
        self._ensure_editable()
        self._model.add_issue(IssueEntry())
        self._mutated()
        return len(self._model.issues) - 1

    def update_issue(self, index: int, **changes) -> IssueEntry:
        self._ensure_editable()
        unknown = set(changes) - _ISSUE_FIELDS
        if unknown:
            raise ValueError(f"Unknown issue fields: {sorted(unknown)}")
        issue = self._model.issues[index]
        for name, value in changes.items():
            setattr(issue, name, value)
        self._mutated()
        return issue

    def remove_issue(self, index: int) -> IssueEntry:
        self._ensure_editable()
        issue = self._model.remove_issue(index)
        self._mutated()
        return issue

    # ------------------------------------------------------------------
    # Duration tracking
    # ------------------------------------------------------------------

    def _on_duration_tick(self) -> None:
        self._tracker.tick()

    def on_app_activated(self) -> None:
        """Window gained focus."""
        if self._tracker.activate():
            self._duration_timer.start()

    def on_app_deactivated(self) -> None:
        """Window lost focus: flush time, pause, and save right away."""
        if self._tracker.deactivate():
            self._duration_timer.stop()
            self.perform_auto_save()

    # ------------------------------------------------------------------
    # Auto-save
    # ------------------------------------------------------------------

    def schedule_auto_save(self) -> None:
        """Restart the debounce countdown."""
        self._autosave_timer.stop()
        self._autosave_timer.start()

    def _on_autosave_due(self) -> None:
        self.perform_auto_save()

    def build_model(self) -> SessionModel:
        """Snapshot of the session with current duration and activity time."""
        self._tracker.tick()
        self._model.area_selections = self._selector.get_selections()
        self._model.accumulated_duration = self._tracker.accumulated
        self._model.last_active_timestamp = self.clock.now()
        return self._model.model_copy(deep=True)

    def perform_auto_save(self) -> bool:
        return self.autosave.save(self.build_model())

    # ------------------------------------------------------------------
    # Validation and export
    # ------------------------------------------------------------------

    def run_validation(self) -> ValidationResult:
        """Validate the session and publish the messages."""
        result = validate_session(self.build_model())
        self.validation_message = result.message
        self.has_validation_error = not result.is_valid
        return result

    def export(self, export_format: ExportFormat | None = None) -> Path | None:
        """
        Validate, render and write the report.

        On success the cache is cleared. On an I/O error the session and
        cache are left as they were and the error goes to status_message.

        Args:
            export_format: Format to use (default: the settings' last format)

        Returns:
            Path of the written report, or None if validation or the write failed
        """
        if not self.run_validation().is_valid:
            return None

        export_format = export_format or self.settings.last_export_format
        model = self.build_model()
        report = render_report(model, model.accumulated_duration, export_format, generated_at=self.clock.now())

        try:
            folder = self.settings.get_export_path()
            folder.mkdir(parents=True, exist_ok=True)
            file_path = folder / build_report_filename(model.title, export_format, self.clock.local_now())
            file_path.write_text(report, encoding="utf-8")
        except OSError as e:
            logger.error(f"Report export failed: {e}")
            self.status_message = f"Error saving report: {e}"
            return None

        self._autosave_timer.stop()
        self.autosave.clear()

        self.status_message = f"Report saved to: {file_path}"
        self.has_validation_error = False
        self.validation_message = ""
        return file_path

    # ------------------------------------------------------------------
    # Opening reports
    # ------------------------------------------------------------------

    def open_report(self, path: Path | str) -> bool:
        """
        Import a JSON report and show it read-only.

        Returns:
            False if the report could not be parsed (session untouched)
        """
        try:
            imported = import_report_file(path)
        except ReportImportError as e:
            logger.warning(f"Report import failed: {e}")
            self.status_message = IMPORT_FAILED_MESSAGE
            return False

        self.load_from_report(imported, path)
        return True

    def load_from_report(self, model: SessionModel, path: Path | str) -> None:
        """Install an imported session in read-only mode with its duration frozen."""
        if self._autosave_timer.is_running:
            self._autosave_timer.stop()
            self.perform_auto_save()
        self._tracker.enter_read_only()
        self._duration_timer.stop()
        self._restore(model)

        self.opened_file_path = str(path)
        self.is_read_only = True
        self.status_message = f"Opened report: {Path(path).name} (read-only)"
        self.has_validation_error = False
        self.validation_message = ""

    def enable_editing(self) -> bool:
        """Leave read-only mode; accumulated time keeps adding up."""
        if not self.is_read_only:
            return False
        self.is_read_only = False
        self._tracker.enable_editing()
        self._duration_timer.start()
        self.status_message = "Editing enabled. Duration timer resumed."
        return True

    def clear_session(self) -> None:
        """Discard the session and cache and start a fresh one."""
        self._autosave_timer.stop()
        self.autosave.clear()

        self._model = self._new_model()
        self._selector.reset()
        self._tracker.reset(timedelta(0))
        self._duration_timer.start()

        self.status_message = ""
        self.validation_message = ""
        self.has_validation_error = False
        self.is_read_only = False
        self.opened_file_path = ""

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_export_path(self, path: str) -> None:
        """Folder chosen in the folder picker."""
        self.settings.export_path = path
        self.settings.save(self.settings_path)

    def set_default_export_format(self, export_format: ExportFormat) -> None:
        self.settings.last_export_format = export_format
        self.settings.save(self.settings_path)


__all__ = [
    "AUTO_SAVE_DELAY_SECONDS",
    "DURATION_TICK_SECONDS",
    "IMPORT_FAILED_MESSAGE",
    "MutationHook",
    "ReadOnlySessionError",
    "SessionController",
    "build_report_filename",
    "sanitize_filename",
]
