"""Configuration for datemarkers.

:class:`MarkerConfig` is a dataclass that captures every tuneable knob
exposed by the engine.  A single instance is shared by the planner,
reconciler, classifier and scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

DEFAULT_OVERLAP_PX: float = 3.0
"""Pixels a marker is raised above its boundary item so it sits on the
item's top border."""


@dataclass
class MarkerConfig:
    """Complete configuration for a :class:`DateMarkerEngine`.

    Every parameter has a default mirroring the observed behaviour of the
    mail client the thresholds were tuned against.

    Parameters
    ----------
    overlap_px:
        Marker position is ``item.position - overlap_px``.
    key_strategy:
        How registry keys are derived.

        * ``"identity"`` -- calendar day plus occurrence slot.  Position and
          label drift become in-place updates.
        * ``"position"`` -- ``pos-<position>-<label>``.  Any drift becomes a
          remove + add pair.
    debounce_seconds:
        Delay between the last ``request()`` and the pass it triggers.
        Zero still coalesces every request issued within one loop tick.
    removal_burst:
        A batch removing more than this many items may be a folder switch.
    sparse_threshold:
        ...but only if fewer than this many items remain afterwards.
    scroll_removal_limit:
        A batch that adds items and removes fewer than this is a scroll load.
    small_change:
        A batch adding and removing fewer than this is an individual action.
    ready_poll_interval:
        Seconds between startup-gate probes.
    ready_timeout:
        Seconds after which the startup gate gives up.
    metrics:
        Optional :class:`~datemarkers.observability.MetricsHook`.
    debug_dump_plan:
        Log every reconciliation plan at DEBUG level.
    """

    # ── Layout ──────────────────────────────────────────────────────────
    overlap_px: float = DEFAULT_OVERLAP_PX

    key_strategy: Literal["identity", "position"] = "identity"

    # ── Scheduling ──────────────────────────────────────────────────────
    debounce_seconds: float = 0.0

    # ── Change classification ───────────────────────────────────────────
    removal_burst: int = 10

    sparse_threshold: int = 5

    scroll_removal_limit: int = 5

    small_change: int = 3

    # ── Startup gate ────────────────────────────────────────────────────
    ready_poll_interval: float = 0.5

    ready_timeout: float = 30.0

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_plan: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.key_strategy not in ("identity", "position"):
            raise ValueError(
                f"key_strategy must be 'identity' or 'position', got {self.key_strategy!r}"
            )
        if self.debounce_seconds < 0:
            raise ValueError(f"debounce_seconds must be >= 0, got {self.debounce_seconds}")
        if self.removal_burst < 0:
            raise ValueError(f"removal_burst must be >= 0, got {self.removal_burst}")
        if self.sparse_threshold < 0:
            raise ValueError(f"sparse_threshold must be >= 0, got {self.sparse_threshold}")
        if self.scroll_removal_limit < 0:
            raise ValueError(
                f"scroll_removal_limit must be >= 0, got {self.scroll_removal_limit}"
            )
        if self.small_change < 0:
            raise ValueError(f"small_change must be >= 0, got {self.small_change}")
        if self.ready_poll_interval <= 0:
            raise ValueError(
                f"ready_poll_interval must be > 0, got {self.ready_poll_interval}"
            )
        if self.ready_timeout < 0:
            raise ValueError(f"ready_timeout must be >= 0, got {self.ready_timeout}")
