"""Rendered-state tracking and reconciliation.

Exports
-------
MarkerRegistry
    Current rendered markers keyed by registry key.
Reconciler
    Diffs desired markers against the registry and applies the result.
"""

from .reconciler import Reconciler
from .registry import MarkerRegistry

__all__ = [
    "MarkerRegistry",
    "Reconciler",
]
