"""Marker registry: the authoritative record of rendered markers.

Every key maps to exactly one live element handle, and no two keys share
a handle.  Handles are created and destroyed only through the reconciler
(and :meth:`MarkerRegistry.clear`), so the registry owns their lifetime.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from datemarkers.errors import InternalInvariantViolation
from datemarkers.models import MarkerRecord
from datemarkers.observability import get_logger

log = get_logger("datemarkers.reconcile")


class MarkerRegistry:
    """Mapping of registry key to :class:`MarkerRecord`."""

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[str, MarkerRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))

    def get(self, key: str) -> MarkerRecord | None:
        return self._records.get(key)

    def items(self) -> list[tuple[str, MarkerRecord]]:
        return list(self._records.items())

    def snapshot(self) -> dict[str, tuple[float, str]]:
        """Return ``{key: (position, label)}`` for every registered marker."""
        return {
            key: (record.position, record.label)
            for key, record in self._records.items()
        }

    def register(self, key: str, record: MarkerRecord) -> None:
        """Add *record* under *key*.

        Raises
        ------
        InternalInvariantViolation
            If *key* is already registered or the handle is already owned
            by another key.
        """
        if key in self._records:
            raise InternalInvariantViolation(
                f"Marker key {key!r} is already registered",
                context={"key": key, "reason": "duplicate_key"},
            )
        for other_key, other in self._records.items():
            if other.handle is record.handle:
                raise InternalInvariantViolation(
                    f"Handle for {key!r} is already owned by {other_key!r}",
                    context={"key": key, "reason": "shared_handle"},
                )
        self._records[key] = record

    def forget(self, key: str) -> MarkerRecord:
        """Remove and return the record under *key* without touching its element."""
        return self._records.pop(key)

    def verify(self) -> None:
        """Check the registry invariants.

        Raises
        ------
        InternalInvariantViolation
            If a record has no handle or two records share one.
        """
        owners: dict[int, str] = {}
        for key, record in self._records.items():
            if record.handle is None:
                raise InternalInvariantViolation(
                    f"Marker {key!r} has no element handle",
                    context={"key": key, "reason": "missing_handle"},
                )
            owner = owners.setdefault(id(record.handle), key)
            if owner != key:
                raise InternalInvariantViolation(
                    f"Markers {owner!r} and {key!r} share an element handle",
                    context={"key": key, "reason": "shared_handle"},
                )

    def clear(self, renderer: Any) -> int:
        """Destroy every registered element and empty the registry.

        A handle the renderer fails to destroy is logged and dropped; the
        registry is always empty afterwards.  Returns the number of records
        that were registered.
        """
        count = len(self._records)
        for key, record in self._records.items():
            if record.handle is None:
                continue
            try:
                renderer.destroy_marker(record.handle)
            except Exception as exc:
                log.warning(
                    "Failed to destroy marker while clearing registry",
                    extra={
                        "extra_fields": {
                            "op": "clear",
                            "key": key,
                            "error": str(exc),
                        }
                    },
                )
        self._records.clear()
        return count
