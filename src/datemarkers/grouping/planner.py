"""Delimiter planner: compute the desired marker set for an item list.

Given the current items, the planner asks the :class:`DateGrouper` for the
day boundaries and turns each into a :class:`Delimiter` positioned just
above its boundary item.  The planner has no side effects beyond logging
and metrics; "today" is read once per call so every label in a pass is
formatted against the same day.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from datetime import date

from datemarkers.config import MarkerConfig
from datemarkers.errors import MarkerLayoutError
from datemarkers.models import Delimiter, Item
from datemarkers.observability import get_logger, resolve_metrics

from .grouper import DateGrouper
from .keys import marker_key
from .labels import format_label
from .timestamps import coerce_position

log = get_logger("datemarkers.grouping")


class DelimiterPlanner:
    """Plans the desired marker set for one reconciliation pass.

    Parameters
    ----------
    config:
        Engine configuration (overlap, key strategy, metrics).
    grouper:
        Boundary finder.  Defaults to a :class:`DateGrouper` with the
        built-in timestamp parser.
    clock:
        Returns the current calendar day.  Defaults to :meth:`date.today`.
    """

    def __init__(
        self,
        config: MarkerConfig,
        grouper: DateGrouper | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._config = config
        self._metrics = resolve_metrics(config.metrics)
        self._grouper = grouper or DateGrouper(metrics=config.metrics)
        self._clock = clock

    def plan(
        self, items: Sequence[Item], today: date | None = None,
    ) -> dict[str, Delimiter]:
        """Compute the desired markers for *items*.

        Parameters
        ----------
        items:
            Items in on-screen order.
        today:
            Day to label against.  Read from the clock when omitted.

        Returns
        -------
        dict[str, Delimiter]
            Desired markers keyed by registry key, in boundary order.
        """
        if today is None:
            today = self._clock()

        desired: dict[str, Delimiter] = {}
        occurrences: Counter[date] = Counter()

        for boundary in self._grouper.boundaries(items):
            item = boundary.item
            occurrence = occurrences[boundary.day]
            occurrences[boundary.day] += 1

            try:
                top = coerce_position(item.position, item.ordinal)
            except MarkerLayoutError as exc:
                log.warning(
                    "Skipping boundary with invalid position",
                    extra={
                        "extra_fields": {
                            "op": "plan",
                            "ordinal": item.ordinal,
                            "position": item.position,
                            "error": exc.message,
                        }
                    },
                )
                self._metrics.increment(
                    "datemarkers.items_skipped_total", tags={"reason": "layout_error"},
                )
                continue

            position = top - self._config.overlap_px
            label = format_label(boundary.day, today)
            key = marker_key(
                self._config.key_strategy,
                day=boundary.day,
                occurrence=occurrence,
                position=position,
                label=label,
            )
            desired[key] = Delimiter(
                key=key, position=position, label=label, day=boundary.day,
            )

        log.debug(
            "Planned delimiters",
            extra={
                "extra_fields": {
                    "op": "plan",
                    "items": len(items),
                    "delimiters": len(desired),
                }
            },
        )
        return desired
