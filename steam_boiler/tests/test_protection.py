"""
Unit tests for the protection checks.
"""

import pytest

from steam_boiler.classifier import CycleReadings
from steam_boiler.messages import Message, MessageKind
from steam_boiler.protection import (
    STOP_CYCLES_BEFORE_EMERGENCY,
    StopDebouncer,
    level_within_limits,
    transmission_failure,
    transmission_failures,
)
from steam_boiler.tests.helpers import TEST_CHARACTERISTICS, cycle_messages


def _readings(*args, **kwargs):
    return CycleReadings.from_mailbox(cycle_messages(*args, **kwargs))


class TestTransmission:
    """Test detection of unusable transmissions."""

    def test_intact(self):
        """Test a complete cycle passes."""
        assert transmission_failures(_readings(), 2) == []
        assert not transmission_failure(_readings(), 2)

    def test_missing_level(self):
        """Test a missing level reading."""
        assert transmission_failures(_readings(level=None), 2) == ["level reading absent"]

    def test_duplicate_steam(self):
        """Test a duplicated steam reading."""
        readings = _readings(extra=[Message(MessageKind.STEAM, value=1.0)])
        assert transmission_failures(readings, 2) == ["steam reading ambiguous"]

    def test_pump_report_count(self):
        """Test too few pump state reports."""
        readings = _readings(pump_states=(False,), pump_control_states=(False, False))
        reasons = transmission_failures(readings, 2)
        assert reasons == ["expected 2 pump state reports, got 1"]

    def test_pump_report_indices(self):
        """Test reports for the wrong pumps."""
        extra = [
            Message(MessageKind.PUMP_STATE, pump=0, state=False),
            Message(MessageKind.PUMP_STATE, pump=0, state=False),
        ]
        readings = _readings(pump_states=(), pump_control_states=(False, False), extra=extra)
        reasons = transmission_failures(readings, 2)
        assert len(reasons) == 1
        assert "do not cover pumps 0..1" in reasons[0]

    def test_failure_logged(self, caplog):
        """Test failures are logged with their reasons."""
        assert transmission_failure(_readings(steam=None), 2)
        assert "steam reading absent" in caplog.text


class TestLimits:
    """Test the hard safety limits."""

    @pytest.mark.parametrize("level,expected", [
        (50.0, True),
        (950.0, True),
        (500.0, True),
        (49.9, False),
        (950.1, False),
    ])
    def test_inclusive_bounds(self, level, expected):
        """Test the limits themselves are allowed."""
        assert level_within_limits(level, TEST_CHARACTERISTICS) is expected


class TestStopDebouncer:
    """Test stop signal debouncing."""

    def test_default_threshold(self):
        """Test three consecutive stops are needed."""
        debouncer = StopDebouncer()
        assert debouncer.threshold == STOP_CYCLES_BEFORE_EMERGENCY == 3
        assert not debouncer.update(True)
        assert not debouncer.update(True)
        assert debouncer.update(True)
        assert debouncer.count == 3

    def test_gap_resets(self):
        """Test a cycle without stop resets the count."""
        debouncer = StopDebouncer()
        debouncer.update(True)
        debouncer.update(True)
        assert not debouncer.update(False)
        assert debouncer.count == 0
        assert not debouncer.update(True)

    def test_custom_threshold(self):
        """Test a shorter threshold."""
        debouncer = StopDebouncer(threshold=2)
        assert not debouncer.update(True)
        assert debouncer.update(True)

    def test_invalid_threshold(self):
        """Test thresholds below one are rejected."""
        with pytest.raises(ValueError, match="at least 1"):
            StopDebouncer(threshold=0)
