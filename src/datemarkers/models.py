"""Public data models for datemarkers.

This module contains the item, marker, operation, and classification
types passed between the grouper, planner, reconciler, classifier and
scheduler.  All types are plain dataclasses with no behaviour beyond
what is needed for structural equality and hashing (where frozen).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ReconcileOpType(str, Enum):
    """Operation types emitted by the reconciler."""

    REMOVE = "remove"
    """Marker no longer desired -- destroy its element and forget it."""

    UPDATE = "update"
    """Same key, different position or label -- mutate the element in place."""

    KEEP = "keep"
    """Marker unchanged -- no collaborator call."""

    ADD = "add"
    """New marker -- create an element and register its handle."""


class ChangeType(str, Enum):
    """Classification of a batch of item insertions/removals."""

    FOLDER_SWITCH = "folder_switch"
    """Almost every item was replaced by an unrelated set."""

    SCROLL_LOAD = "scroll_load"
    """Items were appended as the user scrolled."""

    INDIVIDUAL_ACTION = "individual_action"
    """One or two items changed (archive, delete, move)."""

    UNKNOWN = "unknown"
    """None of the above patterns matched."""


class SchedulerState(str, Enum):
    """Lifecycle states of :class:`UpdateScheduler`."""

    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Item:
    """One row of the external list, as seen at the start of a pass.

    Attributes
    ----------
    ordinal:
        Index of the row in on-screen order.
    position:
        Absolute top offset in pixels.  May be a number, a CSS-like string
        (``"120px"``) or ``None``; invalid values are tolerated.
    raw_timestamp:
        The host's timestamp text for the row, or ``None`` when absent.
    """

    ordinal: int
    position: Any = None
    raw_timestamp: str | None = None


@dataclass(frozen=True)
class Boundary:
    """An item that starts a new calendar day, with its parsed day key."""

    item: Item
    day: date


@dataclass(frozen=True)
class ChangeBatch:
    """Counts of list-item insertions/removals delivered in one notification."""

    added: int = 0
    removed: int = 0

    @property
    def empty(self) -> bool:
        return self.added == 0 and self.removed == 0


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Delimiter:
    """A desired marker: where it should sit and what it should say.

    Attributes
    ----------
    key:
        Registry key.  Equal keys denote the same marker.
    position:
        Absolute top offset of the marker in pixels.
    label:
        Display text (``"Today"``, ``"Yesterday"`` or a long date).
    day:
        Calendar day of the boundary item.
    """

    key: str
    position: float
    label: str
    day: date | None = None


@dataclass
class MarkerRecord:
    """A rendered marker owned by :class:`MarkerRegistry`.

    Attributes
    ----------
    position:
        Position the element was last placed at.
    label:
        Label the element currently shows.
    handle:
        Opaque reference returned by the rendering collaborator.  Never
        inspected, only passed back for update/destroy.
    """

    position: float
    label: str
    handle: Any


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

@dataclass
class ReconcileOp:
    """A single operation in a reconciliation plan.

    Attributes
    ----------
    op_type:
        The kind of operation (remove, update, keep, add).
    key:
        Registry key the operation applies to.
    desired:
        The target marker for ``UPDATE``, ``KEEP`` and ``ADD``.
    """

    op_type: ReconcileOpType
    key: str
    desired: Delimiter | None = None


@dataclass
class ReconcileResult:
    """Summary of one reconciler ``apply`` call.

    Attributes
    ----------
    removed:
        Markers destroyed.
    updated:
        Markers mutated in place.
    kept:
        Markers left untouched.
    added:
        Markers created.
    registry_size:
        Number of markers registered after the call.
    rebuilt:
        ``True`` if an invariant violation forced a full rebuild.
    """

    removed: int = 0
    updated: int = 0
    kept: int = 0
    added: int = 0
    registry_size: int = 0
    rebuilt: bool = False

    @property
    def mutations(self) -> int:
        """Number of rendering-collaborator calls made."""
        return self.removed + self.updated + self.added


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChangeClassification:
    """Outcome of classifying one :class:`ChangeBatch`.

    Attributes
    ----------
    change_type:
        Which pattern matched.
    batch:
        The batch that was classified.
    total:
        Number of items in the list when the batch was classified.
    """

    change_type: ChangeType
    batch: ChangeBatch = field(default_factory=ChangeBatch)
    total: int = 0

    @property
    def clears_registry(self) -> bool:
        """Whether the registry should be eagerly cleared before the pass."""
        return self.change_type is ChangeType.FOLDER_SWITCH
