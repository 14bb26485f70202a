"""Tests for pre-export session validation."""

import pytest

from testcompanion.session_schema import BugEntry, IssueEntry, SessionModel
from testcompanion.validation import task_breakdown_error, validate_session


def test_populated_session_is_valid(populated_session):
    result = validate_session(populated_session)
    assert result.is_valid
    assert result.message == ""


def test_empty_session_lists_every_error():
    result = validate_session(SessionModel())

    assert not result.is_valid
    assert result.errors == [
        "Title is required.",
        "At least one area must be selected.",
        "Tester name(s) required.",
        "Task breakdown must sum to 100% (currently 0.0%).",
        "Charter + Opportunity must sum to 100% (currently 0.0%).",
        "Test notes are required.",
    ]
    assert result.message.count("\n") == 5


def test_whitespace_only_counts_as_blank(populated_session):
    populated_session.title = "   "
    populated_session.test_notes = "\n\t"

    result = validate_session(populated_session)

    assert result.errors == ["Title is required.", "Test notes are required."]


@pytest.mark.parametrize(
    "parts, ok",
    [
        ((33.3, 33.3, 33.4), True),
        ((33.3, 33.3, 33.3), True),
        ((33.3, 33.3, 33.2), False),
        ((100, 0, 0), True),
    ],
)
def test_task_breakdown_tolerance(populated_session, parts, ok):
    populated_session.set_session_setup_percent(parts[0])
    populated_session.set_test_design_execution_percent(parts[1])
    populated_session.set_bug_investigation_percent(parts[2])

    result = validate_session(populated_session)

    assert result.is_valid is ok
    if not ok:
        assert result.errors == ["Task breakdown must sum to 100% (currently 99.8%)."]


def test_bug_and_issue_fields_are_numbered(populated_session):
    populated_session.bugs.append(BugEntry(title="Second", result="r"))
    populated_session.issues.append(IssueEntry(description="d"))

    result = validate_session(populated_session)

    assert result.errors == [
        "Bug #2: Description is required.",
        "Bug #2: Expected Result is required.",
        "Issue #2: Title is required.",
    ]


class TestTaskBreakdownError:
    def test_in_range_is_empty(self, populated_session):
        assert task_breakdown_error(populated_session) == ""

    def test_out_of_range_message(self):
        model = SessionModel()
        model.set_session_setup_percent(50)
        model.set_test_design_execution_percent(25.5)
        assert task_breakdown_error(model) == "Sum is 75.5%. Must equal 100%"


def test_errors_do_not_short_circuit(populated_session):
    populated_session.title = ""
    populated_session.test_notes = ""
    populated_session.bugs[0].title = ""

    result = validate_session(populated_session)

    assert result.errors == [
        "Title is required.",
        "Test notes are required.",
        "Bug #1: Title is required.",
    ]
