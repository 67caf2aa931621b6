"""Desired-state computation: day grouping and marker planning.

Exports
-------
DateGrouper
    Finds the items that start a new calendar day.
DelimiterPlanner
    Turns day boundaries into the desired marker set.
parse_day_key
    Default raw-timestamp parser.
coerce_position
    Turns an item's reported position into a finite pixel offset.
format_label
    ``"Today"`` / ``"Yesterday"`` / long-date marker labels.
marker_key
    Registry key derivation.
"""

from .grouper import DateGrouper
from .keys import marker_key
from .labels import format_label
from .planner import DelimiterPlanner
from .timestamps import coerce_position, parse_day_key

__all__ = [
    "DateGrouper",
    "DelimiterPlanner",
    "coerce_position",
    "format_label",
    "marker_key",
    "parse_day_key",
]
