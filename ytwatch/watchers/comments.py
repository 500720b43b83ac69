from __future__ import annotations
from typing import List

from ..models import CandidateItem
from .base import Watcher


class CommentWatcher(Watcher):
    """New top-level comments on a list of videos."""

    kind = "comments"

    def fetch_candidates(self, source: str) -> List[CandidateItem]:
        return self.client.comment_threads(
            source,
            max_results=self.config.max_results,
            order=self.config.order or "time",
        )
