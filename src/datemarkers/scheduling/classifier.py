"""Change classifier: tell folder switches from scroll loads and single edits.

A folder switch removes almost every row at once and repopulates the list
with an unrelated set.  Diffing key by key would still converge, but with
far more element churn and a window where stale markers sit at wrong
positions, so a folder switch clears the registry eagerly.

Decision table (first match wins):

==========================================================  =================
condition                                                   classification
==========================================================  =================
``removed > removal_burst`` and ``total < sparse_threshold``  folder switch
``added > 0`` and ``removed < scroll_removal_limit``          scroll load
``added < small_change`` and ``removed < small_change``       individual action
otherwise                                                   unknown
==========================================================  =================
"""

from __future__ import annotations

from datemarkers.config import MarkerConfig
from datemarkers.models import ChangeBatch, ChangeClassification, ChangeType
from datemarkers.observability import get_logger, resolve_metrics

log = get_logger("datemarkers.scheduling")


class ChangeClassifier:
    """Classifies batches of item insertion/removal counts.

    Parameters
    ----------
    config:
        Supplies the thresholds and the metrics hook.
    """

    def __init__(self, config: MarkerConfig) -> None:
        self._config = config
        self._metrics = resolve_metrics(config.metrics)

    def classify(self, batch: ChangeBatch, total: int) -> ChangeClassification:
        """Classify *batch* given the list now holds *total* items."""
        cfg = self._config
        added, removed = batch.added, batch.removed

        if removed > cfg.removal_burst and total < cfg.sparse_threshold:
            change_type = ChangeType.FOLDER_SWITCH
        elif added > 0 and removed < cfg.scroll_removal_limit:
            change_type = ChangeType.SCROLL_LOAD
        elif added < cfg.small_change and removed < cfg.small_change:
            change_type = ChangeType.INDIVIDUAL_ACTION
        else:
            change_type = ChangeType.UNKNOWN

        self._metrics.increment(
            "datemarkers.changes_total", tags={"change_type": change_type.value},
        )
        log.info(
            "Change detected",
            extra={
                "extra_fields": {
                    "op": "classify",
                    "change_type": change_type.value,
                    "added": added,
                    "removed": removed,
                    "total": total,
                }
            },
        )
        return ChangeClassification(change_type=change_type, batch=batch, total=total)
