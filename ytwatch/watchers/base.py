# ytwatch/watchers/base.py
# One poll cycle: validate -> watermark -> fetch every source -> detect ->
# merge -> emit at most once. Watchers keep no memory between cycles.

from __future__ import annotations
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, List, Optional

from ..config import WatcherConfig
from ..detect import aggregate, compute_watermark, detect_new_items, merge_results
from ..emitters import Emitter
from ..errors import ConfigError, CycleCancelled, CycleError, EmitError
from ..models import CandidateItem, CycleResult
from ..utils.log import get_logger
from ..utils.timeutil import isoformat, utc_now
from ..youtube import YouTubeClient

logger = get_logger("ytwatch")


class Watcher:
    kind: str = "base"

    def __init__(
        self,
        config: WatcherConfig,
        client: YouTubeClient,
        emitter: Emitter,
        clock: Callable[[], datetime] = utc_now,
        max_workers: int = 8,
    ):
        self.config = config
        self.client = client
        self.emitter = emitter
        self.clock = clock
        self.max_workers = max_workers
        self._cancelled = threading.Event()

    @property
    def name(self) -> str:
        return self.config.label

    def fetch_candidates(self, source: str) -> List[CandidateItem]:
        raise NotImplementedError

    def cancel(self) -> None:
        """Tear-down hook: an in-flight cycle ends without emitting anything."""
        self._cancelled.set()

    def _check_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise CycleCancelled(f"{self.name}: cycle abandoned after cancel()")

    def _fetch_all(self, sources: List[str]) -> List[List[CandidateItem]]:
        if len(sources) == 1:
            return [self.fetch_candidates(sources[0])]
        workers = max(1, min(len(sources), self.max_workers))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"{self.kind}-fetch") as pool:
            # map() yields in submission order, so merge order stays configuration order
            return list(pool.map(self.fetch_candidates, sources))

    def evaluate(self, next_run_at: Optional[datetime] = None) -> Optional[CycleResult]:
        """Run one cycle. Returns the emitted result, or None when nothing is new."""
        if self.kind != self.config.kind:
            raise ConfigError(f"{self.name}: {type(self).__name__} cannot run a {self.config.kind!r} config")
        self.config.validate()
        self._check_cancelled()

        sources = list(self.config.sources)
        watermark = compute_watermark(self.config.poll_interval, next_run_at, now=self.clock())
        logger.info(
            "%s: checking %d source(s) for new %s since %s",
            self.name, len(sources), self.kind, isoformat(watermark),
        )

        try:
            batches = self._fetch_all(sources)
            per_source = []
            for source, batch in zip(sources, batches):
                new_items = detect_new_items(batch, watermark)
                logger.debug("%s: %s -> %d candidate(s), %d new", self.name, source, len(batch), len(new_items))
                per_source.append(aggregate(new_items))
            result = merge_results(per_source)
        except Exception as e:
            logger.exception("%s: error checking for new %s", self.name, self.kind)
            raise CycleError(f"{self.name}: failed to check for new {self.kind}: {e}") from e

        self._check_cancelled()
        if result is None:
            logger.info("%s: no new %s found since last check", self.name, self.kind)
            return None

        try:
            handle = self.emitter.emit(self.name, self.kind, result)
        except EmitError as e:
            logger.exception("%s: could not emit %d new %s", self.name, result.count, self.kind)
            raise CycleError(f"{self.name}: emit failed: {e}") from e
        logger.info(
            "%s: %d new %s, latest %s (execution %s)",
            self.name, result.count, self.kind, result.representative.id, handle,
        )
        return result
