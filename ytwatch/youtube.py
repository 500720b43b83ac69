# ytwatch/youtube.py
# Thin YouTube Data API v3 client. One GET per call, no paging, no retries.
# Raw JSON is turned into CandidateItem / dicts here so watchers never see it.

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from .errors import AuthError, ConfigError, FetchError
from .models import CandidateItem
from .net import DEFAULT_TIMEOUT, make_session
from .utils.timeutil import parse_instant

LOG = logging.getLogger("ytwatch")

API_BASE = "https://www.googleapis.com/youtube/v3"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

COMMENT_MAX_RESULTS = (1, 100)
VIDEO_MAX_RESULTS = (1, 50)
COMMENT_ORDERS = ("time", "relevance")


def check_max_results(value: int, bounds: Sequence[int], what: str) -> int:
    lo, hi = bounds
    if isinstance(value, bool) or not isinstance(value, int) or not lo <= value <= hi:
        raise ConfigError(f"{what} max_results must be an integer in [{lo}, {hi}], got {value!r}")
    return value


def _thumbnail(snippet: Dict[str, Any]) -> Optional[str]:
    return ((snippet.get("thumbnails") or {}).get("default") or {}).get("url")


class YouTubeClient:
    """Authenticated listing calls against the YouTube Data API.

    `session` may be any object with a requests-style `get`; tests pass fakes.
    """

    def __init__(self, session: requests.Session, base_url: str = API_BASE, timeout=DEFAULT_TIMEOUT):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_token(cls, access_token: str, application_name: str = "ytwatch", **kw) -> "YouTubeClient":
        if not access_token:
            raise ConfigError("an access token is required")
        return cls(make_session(access_token, application_name), **kw)

    # ----------------------- transport -----------------------

    def _get(self, resource: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{resource}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"GET {resource} failed: {e}") from e

        if r.status_code in (401, 403):
            raise AuthError(f"GET {resource} rejected ({r.status_code}): {r.text[:200]}")
        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise FetchError(f"GET {resource} returned {r.status_code}") from e
        try:
            data = r.json()
        except ValueError as e:
            raise FetchError(f"GET {resource} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise FetchError(f"GET {resource} returned {type(data).__name__}, expected an object")
        return data

    # ----------------------- listings -----------------------

    def comment_threads(self, video_id: str, max_results: int = 20, order: str = "time") -> List[CandidateItem]:
        """Top-level comments on one video, in the order the API reports them."""
        check_max_results(max_results, COMMENT_MAX_RESULTS, "comment")
        if order not in COMMENT_ORDERS:
            raise ConfigError(f"order must be one of {COMMENT_ORDERS}, got {order!r}")

        data = self._get("commentThreads", {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": max_results,
            "order": order,
        })
        out: List[CandidateItem] = []
        for thread in data.get("items") or []:
            snippet = ((thread.get("snippet") or {}).get("topLevelComment") or {}).get("snippet") or {}
            out.append(CandidateItem(
                id=thread.get("id", ""),
                created_at=parse_instant(snippet.get("publishedAt")),
                source=video_id,
                fields={
                    "videoId": video_id,
                    "commentId": thread.get("id"),
                    "textDisplay": snippet.get("textDisplay"),
                    "authorDisplayName": snippet.get("authorDisplayName"),
                },
            ))
        return out

    def resolve_uploads_playlist(self, channel_id: str) -> Optional[str]:
        """Uploads playlist id of a channel, or None when the channel has none."""
        data = self._get("channels", {"part": "contentDetails", "id": channel_id})
        items = data.get("items") or []
        if not items:
            return None
        details = items[0].get("contentDetails") or {}
        return (details.get("relatedPlaylists") or {}).get("uploads") or None

    def playlist_items(self, playlist_id: str, max_results: int = 10, source: str = "") -> List[CandidateItem]:
        check_max_results(max_results, VIDEO_MAX_RESULTS, "video")
        data = self._get("playlistItems", {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": max_results,
        })
        out: List[CandidateItem] = []
        for item in data.get("items") or []:
            snippet = item.get("snippet") or {}
            video_id = (snippet.get("resourceId") or {}).get("videoId") or ""
            out.append(CandidateItem(
                id=video_id,
                created_at=parse_instant(snippet.get("publishedAt")),
                source=source or playlist_id,
                fields={
                    "videoId": video_id,
                    "title": snippet.get("title"),
                    "description": snippet.get("description"),
                    "channelId": snippet.get("channelId"),
                    "channelTitle": snippet.get("channelTitle"),
                    "thumbnailUrl": _thumbnail(snippet),
                    "videoUrl": WATCH_URL.format(video_id=video_id),
                },
            ))
        return out

    def videos(self, video_ids: Sequence[str], parts: Sequence[str], max_results: int = 5) -> List[Dict[str, Any]]:
        """Raw `videos.list` items; used by the statistics task."""
        check_max_results(max_results, VIDEO_MAX_RESULTS, "video")
        data = self._get("videos", {
            "part": ",".join(parts),
            "id": ",".join(video_ids),
            "maxResults": max_results,
        })
        return list(data.get("items") or [])
