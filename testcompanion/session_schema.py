"""
Session schema models for Test Companion.

Pydantic models for the in-progress session. The same models are written
to the crash-recovery cache, with camelCase keys on disk.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Accepted band for percentage sums; absorbs splits like 33.3 * 3
PERCENT_SUM_MIN = 99.9
PERCENT_SUM_MAX = 100.1

_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


def clamp_percent(value: float) -> float:
    """Clamp to [0, 100] and round to one decimal."""
    return round(min(max(float(value), 0.0), 100.0), 1)


def percent_sum_in_range(total: float) -> bool:
    """Whether a sum of one-decimal percentages is within the accepted band."""
    return PERCENT_SUM_MIN <= round(total, 1) <= PERCENT_SUM_MAX


class BugEntry(BaseModel):
    """A bug logged during the session."""

    title: str = ""
    description: str = ""
    result: str = ""
    expected_result: str = ""
    # May reference files since removed from the session
    related_files: list[str] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class IssueEntry(BaseModel):
    """A non-bug issue noted during the session."""

    title: str = ""
    description: str = ""

    model_config = _MODEL_CONFIG


class SessionModel(BaseModel):
    """
    The testing session aggregate.

    Holds every field of the session form. Percentages go through the
    setter methods so that rounding and the charter/opportunity complement
    are applied in one step.
    """

    title: str = ""
    area_selections: list[str] = Field(default_factory=list)
    start_time: str = ""
    start_time_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    accumulated_duration: timedelta = timedelta(0)
    last_active_timestamp: datetime | None = None
    tester_names: str = ""

    # Task breakdown
    session_setup_percent: float = 0.0
    test_design_execution_percent: float = 0.0
    bug_investigation_percent: float = 0.0

    # Charter vs opportunity
    charter_percent: float = 0.0
    opportunity_percent: float = 0.0

    attached_files: list[str] = Field(default_factory=list)
    test_notes: str = ""
    bugs: list[BugEntry] = Field(default_factory=list)
    issues: list[IssueEntry] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    # -- task breakdown -----------------------------------------------------

    def set_session_setup_percent(self, value: float) -> None:
        self.session_setup_percent = clamp_percent(value)

    def set_test_design_execution_percent(self, value: float) -> None:
        self.test_design_execution_percent = clamp_percent(value)

    def set_bug_investigation_percent(self, value: float) -> None:
        self.bug_investigation_percent = clamp_percent(value)

    @property
    def task_breakdown_sum(self) -> float:
        return (
            self.session_setup_percent
            + self.test_design_execution_percent
            + self.bug_investigation_percent
        )

    # -- charter / opportunity ----------------------------------------------

    def set_charter_percent(self, value: float) -> None:
        """Set charter and derive opportunity as its complement."""
        self.charter_percent = clamp_percent(value)
        self.opportunity_percent = round(100.0 - self.charter_percent, 1)

    def set_opportunity_percent(self, value: float) -> None:
        """Set opportunity and derive charter as its complement."""
        self.opportunity_percent = clamp_percent(value)
        self.charter_percent = round(100.0 - self.opportunity_percent, 1)

    # -- files --------------------------------------------------------------

    def add_files(self, paths: list[str]) -> list[str]:
        """
        Attach files, skipping paths already attached.

        Returns:
            The paths that were newly added
        """
        added: list[str] = []
        for path in paths:
            if path not in self.attached_files:
                self.attached_files.append(path)
                added.append(path)
        return added

    def remove_file(self, path: str) -> bool:
        """Detach a file. Bugs keep any reference to it."""
        if path not in self.attached_files:
            return False
        self.attached_files.remove(path)
        return True

    # -- bugs / issues ------------------------------------------------------

    def add_bug(self, bug: BugEntry | None = None) -> BugEntry:
        bug = bug if bug is not None else BugEntry()
        self.bugs.append(bug)
        return bug

    def remove_bug(self, index: int) -> BugEntry:
        return self.bugs.pop(index)

    def add_issue(self, issue: IssueEntry | None = None) -> IssueEntry:
        issue = issue if issue is not None else IssueEntry()
        self.issues.append(issue)
        return issue

    def remove_issue(self, index: int) -> IssueEntry:
        return self.issues.pop(index)

    def to_cache_json(self) -> str:
        """Serialize for the crash-recovery cache."""
        return self.model_dump_json(indent=2, by_alias=True)


__all__ = [
    "BugEntry",
    "IssueEntry",
    "PERCENT_SUM_MAX",
    "PERCENT_SUM_MIN",
    "SessionModel",
    "clamp_percent",
    "percent_sum_in_range",
]
