"""Metrics hook protocol and no-op default implementation.

The engine emits counters, timings and gauges at each reconciliation
step.  By default a :class:`NoopMetricsHook` is used.  Callers can pass
any object satisfying :class:`MetricsHook` via ``MarkerConfig.metrics``.

Emitted metric names:

* ``datemarkers.passes_total``            -- counter, tag ``outcome``
* ``datemarkers.pass_duration_ms``        -- timing
* ``datemarkers.reconcile_ops_total``     -- counter, tag ``op_type``
* ``datemarkers.markers_active``          -- gauge
* ``datemarkers.changes_total``           -- counter, tag ``change_type``
* ``datemarkers.items_skipped_total``     -- counter, tag ``reason``
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(metrics: Any | None) -> Any:
    """Return *metrics*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return metrics if metrics is not None else NoopMetricsHook()
