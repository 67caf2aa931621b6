"""When to reconcile: change classification, debouncing, startup gating.

Exports
-------
ChangeClassifier
    Folder-switch / scroll-load / individual-action heuristic.
UpdateScheduler
    Debounced single-flight pass runner.
wait_until_ready
    Bounded-retry readiness poll.
"""

from .classifier import ChangeClassifier
from .ready import wait_until_ready
from .scheduler import UpdateScheduler, next_tick

__all__ = [
    "ChangeClassifier",
    "UpdateScheduler",
    "next_tick",
    "wait_until_ready",
]
