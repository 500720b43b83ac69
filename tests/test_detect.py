from __future__ import annotations

from datetime import datetime, timezone, timedelta

import pytest

from ytwatch.detect import aggregate, compute_watermark, detect_new_items, merge_results
from ytwatch.errors import ConfigError
from ytwatch.models import CandidateItem

T = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def item(item_id: str, minutes_before_t: float | None, source: str = "s") -> CandidateItem:
    created = None if minutes_before_t is None else T - timedelta(minutes=minutes_before_t)
    return CandidateItem(id=item_id, created_at=created, source=source, fields={"videoId": item_id})


def test_watermark_uses_next_run_time() -> None:
    assert compute_watermark(timedelta(minutes=30), next_run_at=T) == T - timedelta(minutes=30)


def test_watermark_falls_back_to_now() -> None:
    now = T + timedelta(hours=2)
    assert compute_watermark(timedelta(hours=1), next_run_at=None, now=now) == T + timedelta(hours=1)


def test_naive_next_run_time_is_read_as_utc() -> None:
    naive = T.replace(tzinfo=None)
    watermark = compute_watermark(timedelta(minutes=30), next_run_at=naive)
    assert watermark == T - timedelta(minutes=30)
    assert watermark.tzinfo is not None


def test_naive_clock_reading_is_read_as_utc() -> None:
    assert compute_watermark(timedelta(hours=1), now=T.replace(tzinfo=None)) == T - timedelta(hours=1)


@pytest.mark.parametrize("interval", [timedelta(0), timedelta(seconds=-5)])
def test_watermark_rejects_non_positive_interval(interval: timedelta) -> None:
    with pytest.raises(ConfigError):
        compute_watermark(interval, next_run_at=T)


def test_scenario_only_item_inside_window_is_new() -> None:
    watermark = compute_watermark(timedelta(minutes=30), next_run_at=T)
    new = detect_new_items([item("old", 45), item("fresh", 10)], watermark)

    result = aggregate(new)
    assert [i.id for i in new] == ["fresh"]
    assert result is not None
    assert result.count == 1
    assert result.representative.id == "fresh"


def test_item_exactly_at_watermark_is_excluded() -> None:
    watermark = T - timedelta(minutes=30)
    new = detect_new_items([item("edge", 30), item("after", 29.999)], watermark)
    assert [i.id for i in new] == ["after"]


def test_detection_preserves_fetch_order_and_is_idempotent() -> None:
    watermark = T - timedelta(minutes=60)
    candidates = [item("b", 5), item("a", 50), item("c", 20), item("old", 90)]

    first = detect_new_items(candidates, watermark)
    second = detect_new_items(candidates, watermark)

    assert [i.id for i in first] == ["b", "a", "c"]
    assert first == second


def test_missing_creation_time_is_dropped_not_fatal() -> None:
    watermark = T - timedelta(minutes=60)
    new = detect_new_items([item("nodate", None), item("ok", 1)], watermark)
    assert [i.id for i in new] == ["ok"]


def test_aggregate_empty_is_none() -> None:
    assert aggregate([]) is None


def test_representative_is_first_in_fetch_order_not_newest() -> None:
    result = aggregate([item("older", 20), item("newer", 1)])
    assert result is not None
    assert result.representative.id == "older"


def test_merge_two_sources_in_configuration_order() -> None:
    a = aggregate([item("id1", 5, "A"), item("id2", 20, "A")])
    b = aggregate([item("id3", 3, "B")])

    merged = merge_results([a, b])
    assert merged is not None
    assert [i.id for i in merged.new_items] == ["id1", "id2", "id3"]
    assert merged.count == 3
    assert merged.representative.id == "id1"


def test_merge_where_only_second_source_has_items() -> None:
    b = aggregate([item("id3", 3, "B"), item("id4", 4, "B")])
    merged = merge_results([None, b])
    assert merged is not None
    assert merged.representative.id == "id3"
    assert merged.count == len(merged.new_items) == 2


def test_merge_with_nothing_new_is_none() -> None:
    assert merge_results([None, None]) is None
    assert merge_results([]) is None
