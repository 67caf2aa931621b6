"""Registry key derivation for desired markers.

Two strategies are supported:

* **identity** -- ``day-<YYYY-MM-DD>#<n>`` where ``n`` counts earlier
  boundaries on the same day in this pass (normally ``0``).  The key
  survives layout reflow and midnight relabelling, so those become
  in-place updates.
* **position** -- ``pos-<position>-<label>``.  Identical position and label
  collide on purpose; any change in either yields a new key, so a change
  shows up as a remove + add pair.
"""

from __future__ import annotations

from datetime import date


def format_position(position: float) -> str:
    """Render *position* without a trailing ``.0`` for whole pixels."""
    if float(position).is_integer():
        return str(int(position))
    return repr(float(position))


def identity_key(day: date, occurrence: int = 0) -> str:
    return f"day-{day.isoformat()}#{occurrence}"


def position_key(position: float, label: str) -> str:
    return f"pos-{format_position(position)}-{label}"


def marker_key(
    strategy: str,
    *,
    day: date,
    occurrence: int,
    position: float,
    label: str,
) -> str:
    """Compute the registry key for a marker under *strategy*."""
    if strategy == "position":
        return position_key(position, label)
    if strategy == "identity":
        return identity_key(day, occurrence)
    raise ValueError(f"Unknown key strategy {strategy!r}")
