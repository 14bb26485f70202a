"""Tests for DurationTracker state transitions and accumulation."""

from datetime import timedelta

import pytest

from testcompanion.duration_tracker import DurationTracker, TrackerState
from testcompanion.formatting import DurationCategory


@pytest.fixture
def tracker(clock):
    return DurationTracker(clock)


class TestAccumulation:
    def test_starts_active_at_zero(self, tracker):
        assert tracker.state == TrackerState.ACTIVE
        assert tracker.accumulated == timedelta(0)
        assert tracker.display == "0s"

    def test_tick_adds_elapsed_time(self, tracker, clock):
        clock.advance(90)
        tracker.tick()
        assert tracker.accumulated == timedelta(seconds=90)
        assert tracker.display == "1m 30s"

    def test_inactive_time_is_not_counted(self, tracker, clock):
        clock.advance(10)
        assert tracker.deactivate() is True
        assert tracker.accumulated == timedelta(seconds=10)

        clock.advance(600)
        tracker.tick()
        assert tracker.accumulated == timedelta(seconds=10)

        assert tracker.activate() is True
        clock.advance(5)
        tracker.tick()
        assert tracker.accumulated == timedelta(seconds=15)

    def test_category_follows_total(self, clock):
        tracker = DurationTracker(clock, accumulated=timedelta(hours=4))
        assert tracker.category == DurationCategory.MEDIUM
        clock.advance(1)
        tracker.tick()
        assert tracker.category == DurationCategory.LONG


class TestReadOnly:
    def test_total_frozen_while_read_only(self, tracker, clock):
        clock.advance(30)
        assert tracker.enter_read_only() is True
        assert tracker.accumulated == timedelta(seconds=30)

        clock.advance(3600)
        tracker.tick()
        assert tracker.accumulated == timedelta(seconds=30)

    def test_focus_gained_is_ignored_while_read_only(self, tracker, clock):
        tracker.enter_read_only()
        assert tracker.activate() is False
        assert tracker.state == TrackerState.READ_ONLY

    def test_enable_editing_resumes_from_frozen_total(self, tracker, clock):
        clock.advance(30)
        tracker.enter_read_only()
        clock.advance(100)

        assert tracker.enable_editing() is True
        clock.advance(20)
        tracker.tick()

        assert tracker.state == TrackerState.ACTIVE
        assert tracker.accumulated == timedelta(seconds=50)

    def test_enable_editing_only_from_read_only(self, tracker):
        assert tracker.enable_editing() is False


class TestTransitions:
    @pytest.mark.parametrize(
        "from_state, to_state, expected",
        [
            (TrackerState.ACTIVE, TrackerState.INACTIVE, True),
            (TrackerState.ACTIVE, TrackerState.READ_ONLY, True),
            (TrackerState.INACTIVE, TrackerState.ACTIVE, True),
            (TrackerState.INACTIVE, TrackerState.READ_ONLY, True),
            (TrackerState.READ_ONLY, TrackerState.ACTIVE, True),
            (TrackerState.READ_ONLY, TrackerState.INACTIVE, False),
        ],
    )
    def test_valid_transitions(self, from_state, to_state, expected):
        assert (to_state in DurationTracker.VALID_TRANSITIONS[from_state]) is expected

    def test_double_deactivate_is_ignored(self, tracker):
        assert tracker.deactivate() is True
        assert tracker.deactivate() is False
        assert tracker.state == TrackerState.INACTIVE


def test_reset_and_load(tracker, clock):
    clock.advance(100)
    tracker.enter_read_only()

    tracker.reset(timedelta(seconds=5))
    assert tracker.state == TrackerState.ACTIVE
    assert tracker.accumulated == timedelta(seconds=5)

    tracker.deactivate()
    tracker.load(timedelta(minutes=7))
    assert tracker.state == TrackerState.INACTIVE
    assert tracker.accumulated == timedelta(minutes=7)
