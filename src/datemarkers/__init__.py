"""datemarkers -- date separators over a virtualized, mutating item list.

Public re-exports
-----------------

* **Engine:** :class:`DateMarkerEngine`
* **Configuration:** :class:`MarkerConfig`
* **Components:** :class:`DateGrouper`, :class:`DelimiterPlanner`,
  :class:`MarkerRegistry`, :class:`Reconciler`, :class:`ChangeClassifier`,
  :class:`UpdateScheduler`
* **Collaborator protocols:** :class:`ListSource`, :class:`MarkerRenderer`,
  :class:`ChangeSource`
* **Errors:** every :class:`DateMarkersError` subclass and :class:`ErrorCode`
* **Models:** items, delimiters, operations and classifications

Usage::

    from datemarkers import DateMarkerEngine, MarkerConfig

    engine = DateMarkerEngine(source, renderer, changes, MarkerConfig(debounce_seconds=0.05))
    started = await engine.start()
"""

from __future__ import annotations

# ── Collaborators ───────────────────────────────────────────────────────
from datemarkers.collaborators import ChangeSource, ListSource, MarkerRenderer

# ── Configuration ───────────────────────────────────────────────────────
from datemarkers.config import DEFAULT_OVERLAP_PX, MarkerConfig

# ── Engine ──────────────────────────────────────────────────────────────
from datemarkers.engine import DateMarkerEngine

# ── Errors ──────────────────────────────────────────────────────────────
from datemarkers.errors import (
    CollaboratorUnavailableError,
    DateMarkersError,
    ErrorCode,
    InternalInvariantViolation,
    MarkerLayoutError,
    TimestampParseError,
)

# ── Components ──────────────────────────────────────────────────────────
from datemarkers.grouping import (
    DateGrouper,
    DelimiterPlanner,
    coerce_position,
    format_label,
    parse_day_key,
)

# ── Models ──────────────────────────────────────────────────────────────
from datemarkers.models import (
    Boundary,
    ChangeBatch,
    ChangeClassification,
    ChangeType,
    Delimiter,
    Item,
    MarkerRecord,
    ReconcileOp,
    ReconcileOpType,
    ReconcileResult,
    SchedulerState,
)
from datemarkers.reconcile import MarkerRegistry, Reconciler
from datemarkers.scheduling import ChangeClassifier, UpdateScheduler, wait_until_ready

__all__ = [
    # Engine
    "DateMarkerEngine",
    # Configuration
    "MarkerConfig",
    "DEFAULT_OVERLAP_PX",
    # Components
    "DateGrouper",
    "DelimiterPlanner",
    "MarkerRegistry",
    "Reconciler",
    "ChangeClassifier",
    "UpdateScheduler",
    "wait_until_ready",
    "parse_day_key",
    "coerce_position",
    "format_label",
    # Collaborators
    "ListSource",
    "MarkerRenderer",
    "ChangeSource",
    # Errors
    "DateMarkersError",
    "ErrorCode",
    "TimestampParseError",
    "MarkerLayoutError",
    "CollaboratorUnavailableError",
    "InternalInvariantViolation",
    # Models
    "Item",
    "Boundary",
    "ChangeBatch",
    "ChangeClassification",
    "ChangeType",
    "Delimiter",
    "MarkerRecord",
    "ReconcileOp",
    "ReconcileOpType",
    "ReconcileResult",
    "SchedulerState",
]
