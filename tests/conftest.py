"""Shared fixtures for Test Companion tests."""

from datetime import datetime, timedelta, timezone

import pytest

from testcompanion.area import parse_taxonomy
from testcompanion.autosave import AutoSaveService
from testcompanion.config import AppSettings
from testcompanion.scheduler import ManualClock, Scheduler
from testcompanion.session_schema import BugEntry, IssueEntry, SessionModel

SAMPLE_TAXONOMY = """\
# Sample coverage
Web | Authentication | Login
Web | Authentication | OAuth | Google
Web | Dashboard
API | REST | GET
; trailing comment
Database
"""


@pytest.fixture
def clock():
    """Virtual clock at a fixed UTC+2 moment."""
    return ManualClock(datetime(2026, 3, 14, 9, 30, 0, tzinfo=timezone.utc), utc_offset=timedelta(hours=2))


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def taxonomy():
    return parse_taxonomy(SAMPLE_TAXONOMY)


@pytest.fixture
def coverage_file(tmp_path):
    path = tmp_path / "coverage.ini"
    path.write_text(SAMPLE_TAXONOMY, encoding="utf-8")
    return path


@pytest.fixture
def autosave(tmp_path):
    return AutoSaveService(cache_path=tmp_path / "Cache" / "session_cache.json")


@pytest.fixture
def settings(tmp_path):
    export_dir = tmp_path / "reports"
    export_dir.mkdir()
    return AppSettings(export_path=str(export_dir))


@pytest.fixture
def populated_session():
    """A session that passes validation."""
    model = SessionModel(
        title="Checkout <regression> & \"smoke\"",
        area_selections=["Web", "Authentication", "Login"],
        start_time="14/03/2026 11:30 AM UTC+2",
        tester_names="Ana, Ben",
        test_notes="Tried expired cards.\nTried 3DS flow.",
        attached_files=["/tmp/screen1.png", "/tmp/log.txt"],
        bugs=[
            BugEntry(
                title="Pay button stays disabled",
                description="After editing the card\nthe button greys out",
                result="Cannot pay",
                expected_result="Button enabled",
                related_files=["/tmp/screen1.png"],
            )
        ],
        issues=[IssueEntry(title="Slow page", description="Checkout takes 5s to load")],
    )
    model.set_session_setup_percent(10)
    model.set_test_design_execution_percent(70)
    model.set_bug_investigation_percent(20)
    model.set_charter_percent(80)
    return model
