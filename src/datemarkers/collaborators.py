"""Interfaces of the external collaborators the engine drives.

The engine never touches a rendering surface, item store or event system
directly; it depends on these protocols only.  Implementations may raise
:class:`~datemarkers.errors.CollaboratorUnavailableError` when their
backing container cannot be found, which aborts the current pass.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from datemarkers.models import ChangeBatch, Item


@runtime_checkable
class ListSource(Protocol):
    """Read-only view of the host's ordered item list."""

    def items(self) -> Sequence[Item]:
        """Return the current items in on-screen order.

        Must be cheap and synchronous; it is called on every pass and on
        every change notification.
        """
        ...


@runtime_checkable
class MarkerRenderer(Protocol):
    """Creates, moves and removes marker elements on the host surface.

    Elements are positioned absolutely in the list's coordinate space and
    must not cause the host list to reflow.
    """

    def create_marker(self, position: float, label: str) -> Any:
        """Create a marker element and return an opaque handle to it."""
        ...

    def update_marker(self, handle: Any, position: float, label: str) -> None:
        """Move and relabel an existing element in place."""
        ...

    def destroy_marker(self, handle: Any) -> None:
        """Remove an element from the surface."""
        ...


ChangeHandler = Callable[[ChangeBatch], None]


@runtime_checkable
class ChangeSource(Protocol):
    """Delivers batches of item insertion/removal counts."""

    def on_items_changed(self, handler: ChangeHandler) -> Callable[[], None]:
        """Subscribe *handler*; return a callable that unsubscribes it."""
        ...
