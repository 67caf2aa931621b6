"""Tests for DateGrouper boundary detection."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

from conftest import make_items

from datemarkers.errors import TimestampParseError
from datemarkers.grouping.grouper import DateGrouper
from datemarkers.models import Item

D1 = date(2026, 10, 16)
D2 = date(2026, 10, 17)
D3 = date(2026, 10, 18)


def _ordinals(boundaries):
    return [b.item.ordinal for b in boundaries]


class TestBoundaries:
    def test_empty_sequence(self):
        assert DateGrouper().boundaries([]) == []

    def test_first_valid_item_is_boundary(self):
        items = make_items((0, D1), (40, D1), (80, D1))
        boundaries = DateGrouper().boundaries(items)
        assert _ordinals(boundaries) == [0]
        assert boundaries[0].day == D1

    def test_day_change_starts_boundary(self):
        items = make_items((0, D3), (40, D3), (80, D2), (120, D1), (160, D1))
        boundaries = DateGrouper().boundaries(items)
        assert _ordinals(boundaries) == [0, 2, 3]
        assert [b.day for b in boundaries] == [D3, D2, D1]

    def test_non_contiguous_repeat_is_new_boundary(self):
        items = make_items((0, D1), (40, D2), (80, D1))
        assert _ordinals(DateGrouper().boundaries(items)) == [0, 1, 2]

    def test_unparsable_item_does_not_break_chain(self):
        items = make_items((0, D1), (40, "garbage"), (80, D1), (120, D2))
        assert _ordinals(DateGrouper().boundaries(items)) == [0, 3]

    def test_missing_timestamp_skipped(self):
        items = make_items((0, None), (40, ""), (80, D2))
        assert _ordinals(DateGrouper().boundaries(items)) == [2]

    def test_all_invalid_yields_nothing(self):
        items = make_items((0, None), (40, "nope"))
        assert DateGrouper().boundaries(items) == []

    def test_position_does_not_affect_grouping(self):
        items = make_items(("auto", D1), (None, D2))
        assert _ordinals(DateGrouper().boundaries(items)) == [0, 1]


class TestCustomParser:
    def test_custom_parser_used(self):
        parser = MagicMock(side_effect=lambda raw: date.fromisoformat(raw))
        items = [
            Item(ordinal=0, position=0, raw_timestamp="2026-10-18"),
            Item(ordinal=1, position=40, raw_timestamp="2026-10-17"),
        ]
        assert _ordinals(DateGrouper(parser).boundaries(items)) == [0, 1]
        assert parser.call_count == 2

    def test_parse_errors_counted(self):
        metrics = MagicMock()

        def parser(raw):
            raise TimestampParseError("bad", context={"raw": raw})

        grouper = DateGrouper(parser, metrics=metrics)
        assert grouper.day_of(Item(ordinal=0, raw_timestamp="x")) is None
        metrics.increment.assert_called_once_with(
            "datemarkers.items_skipped_total", tags={"reason": "parse_error"},
        )
