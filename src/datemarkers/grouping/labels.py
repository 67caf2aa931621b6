"""Marker label formatting."""

from __future__ import annotations

from datetime import date, timedelta

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_label(day: date, today: date) -> str:
    """Return ``"Today"``, ``"Yesterday"`` or e.g. ``"November 21, 2025"``.

    *today* is passed in rather than read here so a whole pass labels
    against one instant.
    """
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{_MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"
