"""
ytwatch: polling watchers that turn the YouTube Data API into events.

Each watcher checks its sources once per interval, keeps the items created
since the previous check and emits at most one event summarizing them.
"""

from .detect import aggregate, compute_watermark, detect_new_items, merge_results
from .models import CandidateItem, CycleResult

__all__ = [
    "CandidateItem",
    "CycleResult",
    "aggregate",
    "compute_watermark",
    "detect_new_items",
    "merge_results",
]
