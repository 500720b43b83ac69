# ytwatch/detect.py
# Incremental change detection shared by every watcher:
#   watermark -> filter candidates newer than it -> aggregate -> merge sources.
# Everything here is pure; no I/O and no state between calls.

from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from .errors import ConfigError
from .models import CandidateItem, CycleResult
from .utils.timeutil import parse_instant, utc_now

LOG = logging.getLogger("ytwatch")


def compute_watermark(
    poll_interval: timedelta,
    next_run_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Return the instant everything at or before which counts as already seen.

    The window is one interval wide and ends at the scheduler's next run time,
    or at `now` when the scheduler has none (typically the first cycle).
    """
    if poll_interval <= timedelta(0):
        raise ConfigError(f"poll interval must be positive, got {poll_interval}")
    # Naive anchors are taken as UTC, like every parsed item timestamp
    anchor = parse_instant(next_run_at if next_run_at is not None else (now or utc_now()))
    return anchor - poll_interval


def detect_new_items(candidates: Iterable[CandidateItem], watermark: datetime) -> List[CandidateItem]:
    """Keep candidates created strictly after the watermark, in fetch order."""
    out: List[CandidateItem] = []
    for item in candidates:
        if item.created_at is None:
            LOG.debug("Dropping %s from %s: no creation time", item.id, item.source or "?")
            continue
        if item.created_at > watermark:
            out.append(item)
    return out


def aggregate(new_items: Sequence[CandidateItem]) -> Optional[CycleResult]:
    if not new_items:
        return None
    return CycleResult.of(list(new_items))


def merge_results(results: Iterable[Optional[CycleResult]]) -> Optional[CycleResult]:
    """Merge per-source results in the order given (configuration order).

    The representative is the first item of the first source with anything new,
    which is the fetch-order head, not necessarily the newest item.
    """
    merged: List[CandidateItem] = []
    for result in results:
        if result is None:
            continue
        merged.extend(result.new_items)
    return aggregate(merged)
