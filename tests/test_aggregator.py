from datetime import datetime, timezone

import pytest

from earbug_gchat.domains.summary.aggregator import format_summary, summarize
from earbug_gchat.domains.summary.errors import MalformedTimestampError
from earbug_gchat.domains.summary.models import PlaybackEvent, SummaryStats, date_prefix


NOW = datetime(2024, 3, 2, 0, 0, 0, tzinfo=timezone.utc)


def play(track_id):
    return PlaybackEvent(track_id=track_id)


def test_summarize_counts_yesterday(sample_log):
    stats = summarize(sample_log, NOW)

    assert stats == SummaryStats(cutoff="2024-03-01", play_count=2, distinct_track_count=2, new_track_count=1)


def test_summarize_is_repeatable(sample_log):
    assert summarize(sample_log, NOW) == summarize(sample_log, NOW)


@pytest.mark.parametrize("now", [NOW, datetime(1999, 12, 31, 23, 59, tzinfo=timezone.utc)])
def test_empty_log(now):
    stats = summarize({}, now)

    assert stats.play_count == 0
    assert stats.distinct_track_count == 0
    assert stats.new_track_count == 0


def test_cutoff_is_24h_before_now():
    now = datetime(2024, 3, 1, 5, 30, tzinfo=timezone.utc)

    assert summarize({}, now).cutoff == "2024-02-29"


def test_repeat_plays_count_once_per_track():
    playbacks = {
        "2024-03-01T08:00:00Z": play("A"),
        "2024-03-01T09:00:00Z": play("A"),
        "2024-03-01T10:00:00Z": play("A"),
    }

    stats = summarize(playbacks, NOW)

    assert stats.play_count == 3
    assert stats.distinct_track_count == 1
    assert stats.new_track_count == 1


def test_plays_after_cutoff_are_ignored():
    playbacks = {
        "2024-03-02T00:00:01Z": play("A"),
        "2024-03-05T12:00:00Z": play("B"),
        "2024-03-01T12:00:00Z": play("C"),
    }

    stats = summarize(playbacks, NOW)

    assert stats.play_count == 1
    assert stats.distinct_track_count == 1
    assert stats.new_track_count == 1


def test_track_heard_today_first_is_still_new_yesterday():
    # only plays before the cutoff day make a track "not new"
    playbacks = {
        "2024-03-02T00:10:00Z": play("A"),
        "2024-03-01T10:00:00Z": play("A"),
    }

    assert summarize(playbacks, NOW).new_track_count == 1


def test_new_tracks_never_exceed_distinct_tracks():
    playbacks = {}
    for day in range(1, 29):
        for i in range(day % 5 + 1):
            playbacks[f"2024-02-{day:02d}T{i:02d}:00:00Z"] = play(f"t{(day * 7 + i) % 11}")
    playbacks.update({f"2024-03-01T{h:02d}:00:00Z": play(f"t{h}") for h in range(15)})

    stats = summarize(playbacks, NOW)

    assert stats.play_count == 15
    assert stats.distinct_track_count == 15
    assert 0 < stats.new_track_count <= stats.distinct_track_count
    assert stats.new_track_count == 4  # t11..t14 never played in February


@pytest.mark.parametrize("key", ["2024-03-0", "", "yesterday-ish", "2024-13-01T00:00:00Z", "2024/03/01T00"])
def test_malformed_timestamp_raises(key):
    with pytest.raises(MalformedTimestampError) as exc:
        summarize({key: play("A")}, NOW)

    assert exc.value.key == key


def test_date_prefix_accepts_bare_dates():
    assert date_prefix("2024-03-01") == "2024-03-01"


def test_format_summary():
    stats = SummaryStats(cutoff="2024-03-01", play_count=2, distinct_track_count=2, new_track_count=1)

    assert format_summary(stats) == "2024-03-01 | 2 plays | 2 tracks (1 new)"


def test_format_summary_large_counts():
    stats = SummaryStats(cutoff="2024-03-01", play_count=42, distinct_track_count=17, new_track_count=3)

    assert format_summary(stats) == "2024-03-01 | 42 plays | 17 tracks (3 new)"
