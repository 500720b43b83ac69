from __future__ import annotations
from typing import List

from ..models import CandidateItem
from ..utils.log import get_logger
from .base import Watcher

logger = get_logger("ytwatch")


class VideoWatcher(Watcher):
    """New uploads on a list of channels, read from each channel's uploads playlist."""

    kind = "videos"

    def fetch_candidates(self, source: str) -> List[CandidateItem]:
        playlist_id = self.client.resolve_uploads_playlist(source)
        if not playlist_id:
            logger.info("%s: could not find uploads playlist for channel %s", self.name, source)
            return []
        items = self.client.playlist_items(playlist_id, max_results=self.config.max_results, source=source)
        if not items:
            logger.info("%s: no videos found in uploads playlist %s", self.name, playlist_id)
        return items
