from datetime import datetime, timedelta
from typing import Mapping, Set

from earbug_gchat.domains.summary.models import PlaybackEvent, SummaryStats, date_prefix


SUMMARY_WINDOW = timedelta(hours=24)


def summarize(playbacks: Mapping[str, PlaybackEvent], now: datetime) -> SummaryStats:
    """
    Summarizes the calendar day that `now - 24h` falls on.

    ISO dates sort lexicographically in chronological order, so the date
    prefix of each key is compared to the cutoff as a plain string.
    Plays after the cutoff day are ignored.
    """
    cutoff = (now - SUMMARY_WINDOW).strftime("%Y-%m-%d")

    played_before: Set[str] = set()
    played_yesterday: Set[str] = set()
    yesterday_plays = 0

    for ts, played in playbacks.items():
        day = date_prefix(ts)
        if day < cutoff:
            played_before.add(played.track_id)
        elif day == cutoff:
            yesterday_plays += 1
            played_yesterday.add(played.track_id)

    return SummaryStats(
        cutoff=cutoff,
        play_count=yesterday_plays,
        distinct_track_count=len(played_yesterday),
        new_track_count=len(played_yesterday - played_before),
    )


def format_summary(stats: SummaryStats) -> str:
    return (
        f"{stats.cutoff} | {stats.play_count} plays | "
        f"{stats.distinct_track_count} tracks ({stats.new_track_count} new)"
    )
