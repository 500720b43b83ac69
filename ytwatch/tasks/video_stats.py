# ytwatch/tasks/video_stats.py
# Statistics for a set of videos in one videos.list call, with totals.
# Stateless request/response; nothing to do with change detection.

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..errors import ConfigError
from ..youtube import YouTubeClient


@dataclass(frozen=True)
class VideoStats:
    video_id: str
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    dislike_count: Optional[int] = None
    comment_count: Optional[int] = None
    favorite_count: Optional[int] = None

    title: Optional[str] = None
    description: Optional[str] = None
    channel_id: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[str] = None
    thumbnail_url: Optional[str] = None

    duration: Optional[str] = None
    dimension: Optional[str] = None
    definition: Optional[str] = None


@dataclass(frozen=True)
class VideoStatsResult:
    videos: List[VideoStats] = field(default_factory=list)
    total_videos: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _count(stats: Dict[str, Any], key: str) -> Optional[int]:
    # The API sends counts as decimal strings and omits hidden ones
    raw = stats.get(key)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _to_stats(item: Dict[str, Any], include_snippet: bool, include_content_details: bool) -> VideoStats:
    stats = item.get("statistics") or {}
    kw: Dict[str, Any] = {
        "video_id": item.get("id", ""),
        "view_count": _count(stats, "viewCount"),
        "like_count": _count(stats, "likeCount"),
        "dislike_count": _count(stats, "dislikeCount"),
        "comment_count": _count(stats, "commentCount"),
        "favorite_count": _count(stats, "favoriteCount"),
    }
    snippet = item.get("snippet")
    if include_snippet and snippet:
        kw.update(
            title=snippet.get("title"),
            description=snippet.get("description"),
            channel_id=snippet.get("channelId"),
            channel_title=snippet.get("channelTitle"),
            published_at=snippet.get("publishedAt"),
            thumbnail_url=((snippet.get("thumbnails") or {}).get("default") or {}).get("url"),
        )
    details = item.get("contentDetails")
    if include_content_details and details:
        kw.update(
            duration=details.get("duration"),
            dimension=details.get("dimension"),
            definition=details.get("definition"),
        )
    return VideoStats(**kw)


def get_video_stats(
    client: YouTubeClient,
    video_ids: Sequence[str],
    include_snippet: bool = False,
    include_content_details: bool = False,
    max_results: int = 5,
) -> VideoStatsResult:
    ids = [v.strip() for v in video_ids if v and v.strip()]
    if not ids:
        raise ConfigError("video_ids must contain at least one id")

    parts = ["statistics"]
    if include_snippet:
        parts.append("snippet")
    if include_content_details:
        parts.append("contentDetails")

    items = client.videos(ids, parts, max_results=max_results)
    videos = [_to_stats(it, include_snippet, include_content_details) for it in items]

    return VideoStatsResult(
        videos=videos,
        total_videos=len(videos),
        total_views=sum(v.view_count for v in videos if v.view_count is not None),
        total_likes=sum(v.like_count for v in videos if v.like_count is not None),
        total_comments=sum(v.comment_count for v in videos if v.comment_count is not None),
    )
