"""Test Companion: exploratory testing session recorder.

Session state, validation, duration tracking and report
rendering/re-import for structured exploratory testing sessions.
"""

__version__ = "0.1.0"

# Area Layer
from .area import AreaLevel, AreaNode, CascadingSelector, load_taxonomy, parse_taxonomy

# Session Layer
from .session_schema import BugEntry, IssueEntry, SessionModel
from .duration_tracker import DurationTracker, TrackerState
from .formatting import DurationCategory, duration_category, format_duration, parse_duration
from .validation import ValidationResult, validate_session

# Report Layer
from .report import ExportFormat, ReportImportError, import_report, render_report

# Runtime
from .autosave import AutoSaveService
from .config import AppSettings
from .scheduler import ManualClock, Scheduler, SystemClock, Timer
from .session_controller import ReadOnlySessionError, SessionController

__all__ = [
    # Area
    "AreaLevel",
    "AreaNode",
    "CascadingSelector",
    "load_taxonomy",
    "parse_taxonomy",
    # Session
    "BugEntry",
    "IssueEntry",
    "SessionModel",
    "DurationTracker",
    "TrackerState",
    "DurationCategory",
    "duration_category",
    "format_duration",
    "parse_duration",
    "ValidationResult",
    "validate_session",
    # Report
    "ExportFormat",
    "ReportImportError",
    "import_report",
    "render_report",
    # Runtime
    "AutoSaveService",
    "AppSettings",
    "ManualClock",
    "Scheduler",
    "SystemClock",
    "Timer",
    "ReadOnlySessionError",
    "SessionController",
]
