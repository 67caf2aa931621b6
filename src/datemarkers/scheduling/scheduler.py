"""Debounced, single-flight scheduling of reconciliation passes.

:class:`UpdateScheduler` coalesces bursts of ``request()`` calls into one
pass.  Each request re-arms a debounce timer on the running event loop;
when the timer fires the scheduler either starts a pass or, if a pass is
already running, re-arms itself so the request is served by the next
pass.  A pass waits for the next stable-layout opportunity before it
computes anything.

States:

* ``IDLE`` -- no timer armed, no pass running.
* ``PENDING`` -- debounce timer armed, no pass running.
* ``RUNNING`` -- a pass holds the execution lock.

The lock is an :class:`asyncio.Lock` held by the pass task and released
on every exit path, including errors and cancellation.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Any

from datemarkers.models import SchedulerState
from datemarkers.observability import get_logger, resolve_metrics

log = get_logger("datemarkers.scheduling")


async def next_tick() -> None:
    """Default stable-layout wait: yield to the event loop once."""
    await asyncio.sleep(0)


class UpdateScheduler:
    """Runs *run_pass* at most once at a time, debounced.

    Parameters
    ----------
    run_pass:
        The reconciliation pass.  May be a plain function or a coroutine
        function.
    debounce_seconds:
        Delay between the last request and the pass it triggers.
    wait_for_layout:
        Coroutine function awaited, with the lock held, before each pass.
    metrics:
        Optional metrics hook.
    """

    def __init__(
        self,
        run_pass: Callable[[], Any],
        *,
        debounce_seconds: float = 0.0,
        wait_for_layout: Callable[[], Awaitable[None]] = next_tick,
        metrics: Any | None = None,
    ) -> None:
        if debounce_seconds < 0:
            raise ValueError(f"debounce_seconds must be >= 0, got {debounce_seconds}")
        self._run_pass = run_pass
        self._debounce = debounce_seconds
        self._wait_for_layout = wait_for_layout
        self._metrics = resolve_metrics(metrics)

        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()
        self._idle = asyncio.Event()
        self._idle.set()

        self.requests = 0
        self.reschedules = 0
        self.passes = 0
        self.failures = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def state(self) -> SchedulerState:
        if self.running:
            return SchedulerState.RUNNING
        if self.pending:
            return SchedulerState.PENDING
        return SchedulerState.IDLE

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request(self) -> None:
        """Ask for a pass.  Must be called from the event loop's thread.

        Cancels any armed timer and arms a fresh one.  A request made while
        a pass is running is served by a later pass.
        """
        loop = asyncio.get_running_loop()
        self.requests += 1
        if self._timer is not None:
            self._timer.cancel()
        self._idle.clear()
        self._timer = loop.call_later(self._debounce, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self._task is not None:
            self.reschedules += 1
            log.debug(
                "Update already in progress, rescheduling",
                extra={"extra_fields": {"op": "schedule", "passes": self.passes}},
            )
            self.request()
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        started = time.monotonic()
        outcome = "ok"
        try:
            async with self._lock:
                await self._wait_for_layout()
                result = self._run_pass()
                if inspect.isawaitable(result):
                    await result
        except asyncio.CancelledError:
            outcome = "cancelled"
            raise
        except Exception:
            outcome = "error"
            self.failures += 1
            log.exception(
                "Reconciliation pass failed",
                extra={"extra_fields": {"op": "pass", "passes": self.passes}},
            )
        finally:
            self.passes += 1
            self._task = None
            elapsed_ms = (time.monotonic() - started) * 1000
            self._metrics.increment("datemarkers.passes_total", tags={"outcome": outcome})
            self._metrics.timing("datemarkers.pass_duration_ms", elapsed_ms)
            if self._timer is None:
                self._idle.set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until no timer is armed and no pass is running."""
        await self._idle.wait()

    async def close(self) -> None:
        """Cancel any armed timer and let an in-flight pass finish."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        task = self._task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        self._idle.set()
