"""Reconciler: diff the desired marker set against the registry and apply it.

Planning and execution are separate steps.  :meth:`Reconciler.plan`
compares keys and fields and returns an ordered operation list;
:meth:`Reconciler.apply` plans and then executes each operation through the
rendering collaborator, keeping the registry in step with the surface.

Removals are executed first, then in-place updates, then additions, which
bounds the number of live elements during a pass.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any

from datemarkers.config import MarkerConfig
from datemarkers.errors import InternalInvariantViolation
from datemarkers.models import (
    Delimiter,
    MarkerRecord,
    ReconcileOp,
    ReconcileOpType,
    ReconcileResult,
)
from datemarkers.observability import get_logger, resolve_metrics

from .registry import MarkerRegistry

log = get_logger("datemarkers.reconcile")

_EXECUTION_ORDER = (
    ReconcileOpType.REMOVE,
    ReconcileOpType.UPDATE,
    ReconcileOpType.KEEP,
    ReconcileOpType.ADD,
)


class Reconciler:
    """Applies desired marker sets to a :class:`MarkerRegistry`.

    Parameters
    ----------
    renderer:
        A :class:`~datemarkers.collaborators.MarkerRenderer`.
    config:
        Engine configuration (metrics, debug flags).
    """

    def __init__(self, renderer: Any, config: MarkerConfig) -> None:
        self._renderer = renderer
        self._config = config
        self._metrics = resolve_metrics(config.metrics)

    def plan(
        self, desired: Mapping[str, Delimiter], registry: MarkerRegistry,
    ) -> list[ReconcileOp]:
        """Compute the operations that make *registry* match *desired*.

        - key registered but not desired: **REMOVE**
        - key in both, same position and label: **KEEP**
        - key in both, position or label differs: **UPDATE**
        - key desired but not registered: **ADD**

        Returns
        -------
        list[ReconcileOp]
            Operations grouped in execution order (remove, update, keep, add).
        """
        buckets: dict[ReconcileOpType, list[ReconcileOp]] = {
            op_type: [] for op_type in _EXECUTION_ORDER
        }

        for key, record in registry.items():
            target = desired.get(key)
            if target is None:
                buckets[ReconcileOpType.REMOVE].append(
                    ReconcileOp(op_type=ReconcileOpType.REMOVE, key=key)
                )
            elif record.position != target.position or record.label != target.label:
                buckets[ReconcileOpType.UPDATE].append(
                    ReconcileOp(op_type=ReconcileOpType.UPDATE, key=key, desired=target)
                )
            else:
                buckets[ReconcileOpType.KEEP].append(
                    ReconcileOp(op_type=ReconcileOpType.KEEP, key=key, desired=target)
                )

        for key, target in desired.items():
            if key not in registry:
                buckets[ReconcileOpType.ADD].append(
                    ReconcileOp(op_type=ReconcileOpType.ADD, key=key, desired=target)
                )

        return [op for op_type in _EXECUTION_ORDER for op in buckets[op_type]]

    def apply(
        self, desired: Mapping[str, Delimiter], registry: MarkerRegistry,
    ) -> ReconcileResult:
        """Make *registry* (and the rendered surface) match *desired*.

        If the registry fails its invariant check, every element is
        destroyed and the registry is rebuilt from *desired*.  Exceptions
        raised by the renderer propagate; operations completed before the
        failure remain recorded in the registry.

        Returns
        -------
        ReconcileResult
            Counts of what was done.
        """
        rebuilt = False
        try:
            registry.verify()
        except InternalInvariantViolation as exc:
            self._rebuild(registry, exc)
            rebuilt = True

        ops = self.plan(desired, registry)
        self._dump_plan(ops)
        try:
            result = self._execute(ops, registry)
        except InternalInvariantViolation as exc:
            if rebuilt:
                raise
            self._rebuild(registry, exc)
            rebuilt = True
            ops = self.plan(desired, registry)
            result = self._execute(ops, registry)

        result.rebuilt = rebuilt
        result.registry_size = len(registry)

        _emit_reconcile_metrics(self._metrics, ops, result.registry_size)
        log.info(
            "Reconcile complete",
            extra={
                "extra_fields": {
                    "op": "reconcile",
                    "desired": len(desired),
                    "removed": result.removed,
                    "updated": result.updated,
                    "kept": result.kept,
                    "added": result.added,
                    "registry_size": result.registry_size,
                    "rebuilt": rebuilt,
                }
            },
        )
        return result

    def _execute(
        self, ops: list[ReconcileOp], registry: MarkerRegistry,
    ) -> ReconcileResult:
        result = ReconcileResult()
        for op in ops:
            if op.op_type == ReconcileOpType.REMOVE:
                record = registry.get(op.key)
                if record is not None:
                    self._renderer.destroy_marker(record.handle)
                    registry.forget(op.key)
                    result.removed += 1

            elif op.op_type == ReconcileOpType.UPDATE and op.desired is not None:
                record = registry.get(op.key)
                if record is None:
                    raise InternalInvariantViolation(
                        f"Marker {op.key!r} vanished before update",
                        context={"key": op.key, "reason": "missing_record"},
                    )
                self._renderer.update_marker(
                    record.handle, op.desired.position, op.desired.label,
                )
                record.position = op.desired.position
                record.label = op.desired.label
                result.updated += 1

            elif op.op_type == ReconcileOpType.KEEP:
                result.kept += 1

            elif op.op_type == ReconcileOpType.ADD and op.desired is not None:
                handle = self._renderer.create_marker(
                    op.desired.position, op.desired.label,
                )
                registry.register(
                    op.key,
                    MarkerRecord(
                        position=op.desired.position,
                        label=op.desired.label,
                        handle=handle,
                    ),
                )
                result.added += 1
        return result

    def _rebuild(
        self, registry: MarkerRegistry, exc: InternalInvariantViolation,
    ) -> None:
        log.error(
            "Registry invariant violated, rebuilding",
            extra={
                "extra_fields": {
                    "op": "reconcile",
                    "error": exc.message,
                    **exc.context,
                }
            },
        )
        registry.clear(self._renderer)

    def _dump_plan(self, ops: list[ReconcileOp]) -> None:
        if not self._config.debug_dump_plan:
            return
        log.debug(
            "Reconcile plan",
            extra={
                "extra_fields": {
                    "op": "reconcile",
                    "plan": [
                        {
                            "op_type": op.op_type.value,
                            "key": op.key,
                            "position": op.desired.position if op.desired else None,
                            "label": op.desired.label if op.desired else None,
                        }
                        for op in ops
                    ],
                }
            },
        )


def _emit_reconcile_metrics(
    metrics: Any, ops: list[ReconcileOp], registry_size: int,
) -> None:
    """Emit ``reconcile_ops_total`` counters and the active-marker gauge."""
    op_counts: Counter[str] = Counter()
    for op in ops:
        op_counts[op.op_type.value] += 1
    for op_type_val, count in op_counts.items():
        metrics.increment(
            "datemarkers.reconcile_ops_total", count, tags={"op_type": op_type_val},
        )
    metrics.gauge("datemarkers.markers_active", registry_size)
