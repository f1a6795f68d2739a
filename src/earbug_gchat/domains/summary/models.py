import re
from dataclasses import dataclass
from datetime import date
from typing import Dict

from earbug_gchat.domains.summary.errors import MalformedTimestampError


@dataclass(frozen=True)
class PlaybackEvent:
    """One play of one track."""
    track_id: str


# key: playback timestamp, first 10 chars are the YYYY-MM-DD date
PlaybackLog = Dict[str, PlaybackEvent]


@dataclass(frozen=True)
class SummaryStats:
    cutoff: str
    play_count: int
    distinct_track_count: int
    new_track_count: int


_DATE_PREFIX = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def date_prefix(key: str) -> str:
    """Returns the YYYY-MM-DD prefix of a playback key, or raises MalformedTimestampError."""
    prefix = key[:10]
    if not _DATE_PREFIX.fullmatch(prefix):
        raise MalformedTimestampError(key)
    try:
        date.fromisoformat(prefix)
    except ValueError as e:
        raise MalformedTimestampError(key) from e
    return prefix
