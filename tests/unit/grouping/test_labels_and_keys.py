"""Tests for label formatting and registry key derivation."""

from __future__ import annotations

from datetime import date

import pytest

from datemarkers.grouping.keys import (
    format_position,
    identity_key,
    marker_key,
    position_key,
)
from datemarkers.grouping.labels import format_label

TODAY = date(2026, 10, 18)


class TestFormatLabel:
    def test_today(self):
        assert format_label(TODAY, TODAY) == "Today"

    def test_yesterday(self):
        assert format_label(date(2026, 10, 17), TODAY) == "Yesterday"

    def test_yesterday_across_month(self):
        assert format_label(date(2026, 9, 30), date(2026, 10, 1)) == "Yesterday"

    def test_older_day_long_form(self):
        assert format_label(date(2025, 11, 21), TODAY) == "November 21, 2025"

    def test_future_day_long_form(self):
        assert format_label(date(2026, 10, 19), TODAY) == "October 19, 2026"


class TestKeys:
    def test_format_position_whole(self):
        assert format_position(77.0) == "77"

    def test_format_position_fractional(self):
        assert format_position(77.5) == "77.5"

    def test_position_key_shape(self):
        assert position_key(77.0, "Today") == "pos-77-Today"

    def test_identity_key_shape(self):
        assert identity_key(TODAY, 0) == "day-2026-10-18#0"

    def test_position_strategy_changes_with_position(self):
        a = marker_key("position", day=TODAY, occurrence=0, position=10, label="Today")
        b = marker_key("position", day=TODAY, occurrence=0, position=11, label="Today")
        assert a != b

    def test_identity_strategy_ignores_position_and_label(self):
        a = marker_key("identity", day=TODAY, occurrence=0, position=10, label="Today")
        b = marker_key("identity", day=TODAY, occurrence=0, position=11, label="Yesterday")
        assert a == b

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown key strategy"):
            marker_key("bogus", day=TODAY, occurrence=0, position=0, label="x")
