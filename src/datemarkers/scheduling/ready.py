"""Bounded-retry readiness gate used before the engine wires itself up."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from datemarkers.errors import CollaboratorUnavailableError
from datemarkers.observability import get_logger

log = get_logger("datemarkers.scheduling")


async def wait_until_ready(
    probe: Callable[[], bool],
    *,
    interval: float = 0.5,
    timeout: float = 30.0,
) -> bool:
    """Poll *probe* every *interval* seconds until it returns ``True``.

    A probe raising :class:`CollaboratorUnavailableError` counts as "not
    ready yet".  Returns ``False`` once *timeout* seconds have passed
    without success.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    attempts = 0
    while True:
        attempts += 1
        try:
            if probe():
                log.info(
                    "List ready",
                    extra={"extra_fields": {"op": "ready", "attempts": attempts}},
                )
                return True
        except CollaboratorUnavailableError as exc:
            log.debug(
                "List not available yet",
                extra={"extra_fields": {"op": "ready", "error": exc.message}},
            )

        remaining = deadline - loop.time()
        if remaining <= 0:
            log.warning(
                "Gave up waiting for list",
                extra={
                    "extra_fields": {
                        "op": "ready",
                        "attempts": attempts,
                        "timeout": timeout,
                    }
                },
            )
            return False
        await asyncio.sleep(min(interval, remaining))
