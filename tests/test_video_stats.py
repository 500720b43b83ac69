from __future__ import annotations

import pytest

from fakes import FakeResponse, FakeSession
from ytwatch.errors import ConfigError
from ytwatch.tasks import get_video_stats
from ytwatch.youtube import YouTubeClient


def test_stats_with_snippet_and_totals() -> None:
    session = FakeSession(responses={"videos": FakeResponse({"items": [
        {
            "id": "a",
            "statistics": {"viewCount": "100", "likeCount": "10", "commentCount": "3", "favoriteCount": "0"},
            "snippet": {"title": "A", "channelId": "UC1", "publishedAt": "2026-01-01T00:00:00Z",
                        "thumbnails": {"default": {"url": "https://i.ytimg.com/a.jpg"}}},
        },
        {
            # likes hidden by the uploader
            "id": "b",
            "statistics": {"viewCount": "50", "commentCount": "2"},
            "snippet": {"title": "B"},
        },
    ]})})

    result = get_video_stats(YouTubeClient(session), ["a", "b"], include_snippet=True)

    assert result.total_videos == 2
    assert result.total_views == 150
    assert result.total_likes == 10
    assert result.total_comments == 5
    a, b = result.videos
    assert a.title == "A"
    assert a.thumbnail_url == "https://i.ytimg.com/a.jpg"
    assert b.like_count is None
    _, params = session.calls[0]
    assert params == {"part": "statistics,snippet", "id": "a,b", "maxResults": 5}


def test_snippet_ignored_unless_requested() -> None:
    session = FakeSession(responses={"videos": FakeResponse({"items": [
        {"id": "a", "statistics": {"viewCount": "1"}, "snippet": {"title": "A"},
         "contentDetails": {"duration": "PT4M13S", "dimension": "2d", "definition": "hd"}},
    ]})})

    result = get_video_stats(YouTubeClient(session), ["a"], include_content_details=True)

    v = result.videos[0]
    assert v.title is None
    assert v.duration == "PT4M13S"
    assert v.definition == "hd"
    assert session.calls[0][1]["part"] == "statistics,contentDetails"
    assert result.to_dict()["videos"][0]["video_id"] == "a"


def test_empty_id_list_is_config_error() -> None:
    session = FakeSession(responses={})
    with pytest.raises(ConfigError):
        get_video_stats(YouTubeClient(session), [" "])
    assert session.calls == []
