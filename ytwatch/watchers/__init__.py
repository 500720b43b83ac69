from __future__ import annotations

from .base import Watcher
from .comments import CommentWatcher
from .videos import VideoWatcher

WATCHERS = {
    CommentWatcher.kind: CommentWatcher,
    VideoWatcher.kind: VideoWatcher,
}

__all__ = ["Watcher", "CommentWatcher", "VideoWatcher", "WATCHERS"]
