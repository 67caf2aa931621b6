"""Date grouper: find the items that start a new calendar day.

Grouping depends only on parsed day keys and sequence order.  Items whose
timestamp is absent or unparsable are skipped without breaking the
adjacency chain: the nearest preceding *valid* item is always the one a
new item is compared against.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from datemarkers.errors import TimestampParseError
from datemarkers.models import Boundary, Item
from datemarkers.observability import NoopMetricsHook, get_logger

from .timestamps import parse_day_key

log = get_logger("datemarkers.grouping")


class DateGrouper:
    """Computes day boundaries over an ordered item sequence.

    Parameters
    ----------
    parser:
        Callable turning a raw timestamp into a :class:`date`.  Must raise
        :class:`TimestampParseError` for input it cannot read.
    metrics:
        Metrics hook for skipped-item counters.
    """

    def __init__(
        self,
        parser: Callable[[str], date] = parse_day_key,
        metrics: Any | None = None,
    ) -> None:
        self._parser = parser
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def day_of(self, item: Item) -> date | None:
        """Return the calendar day of *item*, or ``None`` if it has none."""
        raw = item.raw_timestamp
        if not raw:
            self._metrics.increment(
                "datemarkers.items_skipped_total", tags={"reason": "no_timestamp"},
            )
            return None
        try:
            return self._parser(raw)
        except TimestampParseError as exc:
            log.debug(
                "Skipping item with unparsable timestamp",
                extra={
                    "extra_fields": {
                        "op": "group",
                        "ordinal": item.ordinal,
                        "raw": raw,
                        "error": exc.message,
                    }
                },
            )
            self._metrics.increment(
                "datemarkers.items_skipped_total", tags={"reason": "parse_error"},
            )
            return None

    def boundaries(self, items: Iterable[Item]) -> list[Boundary]:
        """Return the ordered subsequence of items that start a new day.

        An item is a boundary iff it is the first item with a valid day, or
        its day differs from the nearest preceding valid item's day.
        """
        result: list[Boundary] = []
        previous: date | None = None
        for item in items:
            day = self.day_of(item)
            if day is None:
                continue
            if previous is None or day != previous:
                result.append(Boundary(item=item, day=day))
            previous = day
        return result
