"""Pre-export validation of a testing session."""

from __future__ import annotations

from dataclasses import dataclass, field

from .session_schema import SessionModel, percent_sum_in_range


@dataclass
class ValidationResult:
    """Outcome of validating a session. Empty ``errors`` means valid."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """All errors, one per line, for display."""
        return "\n".join(self.errors)


def _blank(value: str) -> bool:
    return not value or not value.strip()


def validate_session(model: SessionModel) -> ValidationResult:
    """
    Check every export rule and collect all violations.

    Rules are independent; a failing rule never hides a later one.
    """
    errors: list[str] = []

    if _blank(model.title):
        errors.append("Title is required.")

    if not model.area_selections:
        errors.append("At least one area must be selected.")

    if _blank(model.tester_names):
        errors.append("Tester name(s) required.")

    task_sum = model.task_breakdown_sum
    if not percent_sum_in_range(task_sum):
        errors.append(f"Task breakdown must sum to 100% (currently {task_sum:.1f}%).")

    charter_sum = model.charter_percent + model.opportunity_percent
    if not percent_sum_in_range(charter_sum):
        errors.append(f"Charter + Opportunity must sum to 100% (currently {charter_sum:.1f}%).")

    if _blank(model.test_notes):
        errors.append("Test notes are required.")

    for number, bug in enumerate(model.bugs, start=1):
        if _blank(bug.title):
            errors.append(f"Bug #{number}: Title is required.")
        if _blank(bug.description):
            errors.append(f"Bug #{number}: Description is required.")
        if _blank(bug.result):
            errors.append(f"Bug #{number}: Result is required.")
        if _blank(bug.expected_result):
            errors.append(f"Bug #{number}: Expected Result is required.")

    for number, issue in enumerate(model.issues, start=1):
        if _blank(issue.title):
            errors.append(f"Issue #{number}: Title is required.")
        if _blank(issue.description):
            errors.append(f"Issue #{number}: Description is required.")

    return ValidationResult(errors=errors)


def task_breakdown_error(model: SessionModel) -> str:
    """Inline warning for the task breakdown, or "" when the sum is in range."""
    task_sum = model.task_breakdown_sum
    if percent_sum_in_range(task_sum):
        return ""
    return f"Sum is {task_sum:.1f}%. Must equal 100%"


__all__ = ["ValidationResult", "task_breakdown_error", "validate_session"]
