"""Date marker engine: wires classification, scheduling and reconciliation.

Data flow for one change notification::

    ChangeSource -> handle_change -> ChangeClassifier (folder switch: clear)
                 -> UpdateScheduler.request() -> (debounce, lock, layout wait)
                 -> run_pass: DelimiterPlanner -> Reconciler.apply

Usage::

    engine = DateMarkerEngine(source, renderer, changes)
    async with engine:
        ...  # markers follow the list until the block exits
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any

from datemarkers.config import MarkerConfig
from datemarkers.errors import CollaboratorUnavailableError
from datemarkers.grouping import DateGrouper, DelimiterPlanner, parse_day_key
from datemarkers.models import ChangeBatch, ChangeClassification, ReconcileResult
from datemarkers.observability import get_logger
from datemarkers.reconcile import MarkerRegistry, Reconciler
from datemarkers.scheduling import (
    ChangeClassifier,
    UpdateScheduler,
    next_tick,
    wait_until_ready,
)

log = get_logger("datemarkers.engine")


class DateMarkerEngine:
    """Keeps date markers in step with a virtualized item list.

    Parameters
    ----------
    source:
        A :class:`~datemarkers.collaborators.ListSource`.
    renderer:
        A :class:`~datemarkers.collaborators.MarkerRenderer`.
    changes:
        A :class:`~datemarkers.collaborators.ChangeSource`.
    config:
        Engine configuration.  Defaults to :class:`MarkerConfig()`.
    parser:
        Raw-timestamp parser.  Defaults to :func:`parse_day_key`.
    clock:
        Returns the current day for label formatting.
    wait_for_layout:
        Coroutine function a pass awaits before reading positions.
    """

    def __init__(
        self,
        source: Any,
        renderer: Any,
        changes: Any,
        config: MarkerConfig | None = None,
        *,
        parser: Callable[[str], date] = parse_day_key,
        clock: Callable[[], date] = date.today,
        wait_for_layout: Callable[[], Awaitable[None]] = next_tick,
    ) -> None:
        self._config = config or MarkerConfig()
        self._source = source
        self._renderer = renderer
        self._changes = changes

        self.registry = MarkerRegistry()
        self._planner = DelimiterPlanner(
            self._config,
            DateGrouper(parser, metrics=self._config.metrics),
            clock,
        )
        self._reconciler = Reconciler(renderer, self._config)
        self._classifier = ChangeClassifier(self._config)
        self.scheduler = UpdateScheduler(
            self.run_pass,
            debounce_seconds=self._config.debounce_seconds,
            wait_for_layout=wait_for_layout,
            metrics=self._config.metrics,
        )

        self._unsubscribe: Callable[[], None] | None = None
        self.last_result: ReconcileResult | None = None

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Wait for the list to become non-empty, then subscribe and reconcile.

        Returns ``False`` (and wires nothing) if the list is still empty
        after ``config.ready_timeout`` seconds.
        """
        if self.started:
            return True
        ready = await wait_until_ready(
            self._has_items,
            interval=self._config.ready_poll_interval,
            timeout=self._config.ready_timeout,
        )
        if not ready:
            return False
        self._unsubscribe = self._changes.on_items_changed(self.handle_change)
        log.info("Engine started", extra={"extra_fields": {"op": "start"}})
        self.scheduler.request()
        return True

    async def stop(self, *, clear: bool = False) -> None:
        """Unsubscribe, drop any pending request and wait for a running pass.

        With ``clear=True`` every rendered marker is destroyed afterwards.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.scheduler.close()
        if clear:
            self.registry.clear(self._renderer)
        log.info(
            "Engine stopped",
            extra={"extra_fields": {"op": "stop", "markers": len(self.registry)}},
        )

    async def __aenter__(self) -> DateMarkerEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Notification handling
    # ------------------------------------------------------------------

    def handle_change(self, batch: ChangeBatch) -> ChangeClassification | None:
        """Classify *batch*, clear on folder switch, and request a pass.

        Batches with no added and no removed items are ignored.
        """
        if batch.empty:
            return None

        try:
            total = len(self._source.items())
        except CollaboratorUnavailableError as exc:
            log.warning(
                "List unavailable while classifying change",
                extra={"extra_fields": {"op": "classify", "error": exc.message}},
            )
            self.scheduler.request()
            return None

        classification = self._classifier.classify(batch, total)
        if classification.clears_registry:
            cleared = self.registry.clear(self._renderer)
            log.info(
                "Detected folder switch, cleared registry",
                extra={"extra_fields": {"op": "classify", "cleared": cleared}},
            )
        self.scheduler.request()
        return classification

    # ------------------------------------------------------------------
    # Reconciliation pass
    # ------------------------------------------------------------------

    def run_pass(self) -> ReconcileResult | None:
        """Plan and apply markers for the current list.  Run by the scheduler.

        Returns ``None`` if a collaborator was unavailable; the next
        notification triggers a fresh attempt.
        """
        try:
            items = list(self._source.items())
            desired = self._planner.plan(items)
            result = self._reconciler.apply(desired, self.registry)
        except CollaboratorUnavailableError as exc:
            log.warning(
                "Collaborator unavailable, pass aborted",
                extra={
                    "extra_fields": {
                        "op": "pass",
                        "error": exc.message,
                        **exc.context,
                    }
                },
            )
            return None
        self.last_result = result
        return result

    def _has_items(self) -> bool:
        return len(self._source.items()) > 0
