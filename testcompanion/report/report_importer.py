"""Re-import of exported JSON reports."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..formatting import parse_duration
from ..session_schema import BugEntry, IssueEntry, SessionModel

logger = logging.getLogger(__name__)


class ReportImportError(ValueError):
    """Raised when a report cannot be parsed."""


def _get_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _get_float(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _get_str_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else "" for item in value]


def _get_objects(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def import_report(json_text: str) -> SessionModel:
    """
    Rebuild a session from an exported JSON report.

    Missing or mistyped fields fall back to empty values. The duration is
    recovered from its formatted string; ``reportGenerated`` is ignored.

    Args:
        json_text: Content of a JSON report

    Returns:
        Reconstructed session

    Raises:
        ReportImportError: If the text is not a JSON object
    """
    try:
        root = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ReportImportError(f"Report is not valid JSON: {e}") from e

    if not isinstance(root, dict):
        raise ReportImportError("Report must be a JSON object")

    breakdown = root.get("taskBreakdown")
    if not isinstance(breakdown, dict):
        breakdown = {}

    return SessionModel(
        title=_get_str(root, "title"),
        area_selections=_get_str_list(root, "areas"),
        start_time=_get_str(root, "start"),
        accumulated_duration=parse_duration(_get_str(root, "duration")),
        tester_names=_get_str(root, "testers"),
        session_setup_percent=_get_float(breakdown, "sessionSetup"),
        test_design_execution_percent=_get_float(breakdown, "testDesignExecution"),
        bug_investigation_percent=_get_float(breakdown, "bugInvestigationReporting"),
        charter_percent=_get_float(root, "charter"),
        opportunity_percent=_get_float(root, "opportunity"),
        attached_files=_get_str_list(root, "attachedFiles"),
        test_notes=_get_str(root, "testNotes"),
        bugs=[
            BugEntry(
                title=_get_str(bug, "title"),
                description=_get_str(bug, "description"),
                result=_get_str(bug, "result"),
                expected_result=_get_str(bug, "expectedResult"),
                related_files=_get_str_list(bug, "relatedFiles"),
            )
            for bug in _get_objects(root, "bugs")
        ],
        issues=[
            IssueEntry(
                title=_get_str(issue, "title"),
                description=_get_str(issue, "description"),
            )
            for issue in _get_objects(root, "issues")
        ],
    )


def import_report_file(path: Path | str) -> SessionModel:
    """Read and import a JSON report file."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReportImportError(f"Could not read report {path}: {e}") from e

    logger.debug(f"Importing report from {path}")
    return import_report(content)


__all__ = ["ReportImportError", "import_report", "import_report_file"]
