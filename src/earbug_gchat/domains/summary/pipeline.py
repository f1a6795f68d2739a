"""
The /summary request as a fixed sequence of stages:

    validating -> fetching -> decoding -> aggregating -> notifying

Each stage either returns its value or raises StageError with the HTTP status
and the short label the caller gets back. The first failure ends the request,
so nothing is posted to chat unless every earlier stage succeeded.
"""
import asyncio
import time
from contextlib import closing
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, BinaryIO, Callable

import structlog
from prometheus_client import Counter, Histogram
from pydantic import ValidationError as PydanticValidationError

from earbug_gchat.api.schemas import SummaryRequest
from earbug_gchat.clients.gchat import Notifier
from earbug_gchat.clients.storage import ObjectStore
from earbug_gchat.domains.summary import decoder
from earbug_gchat.domains.summary.aggregator import format_summary, summarize
from earbug_gchat.domains.summary.errors import (
    DecompressionError,
    MalformedTimestampError,
    ParseError,
    ReadError,
    StageError,
    ValidationError,
)
from earbug_gchat.domains.summary.models import PlaybackLog, SummaryStats


logger = structlog.get_logger("summary")


VALIDATING = "validating"
FETCHING = "fetching"
DECODING = "decoding"
AGGREGATING = "aggregating"
NOTIFYING = "notifying"

OBJECT_SUFFIX = ".pb.zstd"

# Decode step -> label returned to the caller
DECODE_FAILURES = (
    (DecompressionError, "create zstd reader"),
    (ReadError, "read object"),
    (ParseError, "unmarshal as proto"),
    (MalformedTimestampError, "invalid playback timestamp"),
)


# Counters
SUMMARIES = Counter("earbug_summaries_total", "Summary requests by outcome (ok or the failing stage)", ["outcome"])
SUMMARY_DURATION = Histogram("earbug_summary_duration_seconds", "Time spent handling a summary request")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Services:
    """Collaborators shared by every request. Built once at startup, never mutated."""
    store: ObjectStore
    notifier: Notifier
    timeout: float = 5.0
    clock: Callable[[], datetime] = field(default=_utcnow)


@dataclass(frozen=True)
class Outcome:
    status_code: int
    body: str


class Deadline:
    def __init__(self, timeout: float):
        self._expires = time.monotonic() + timeout

    def remaining(self) -> float:
        return max(0.0, self._expires - time.monotonic())


def object_key(user: str) -> str:
    return user + OBJECT_SUFFIX


def extract_user(method: str, body: bytes) -> str:
    if method != "POST":
        raise StageError(VALIDATING, 405, "invalid method", ValidationError(f"POST only, got {method}"))
    try:
        req = SummaryRequest.model_validate_json(body)
    except PydanticValidationError as e:
        raise StageError(VALIDATING, 400, "unmarshal body", e) from e
    return req.user


async def _read_body(read_body: Callable[[], Awaitable[bytes]]) -> bytes:
    try:
        return await read_body()
    except Exception as e:
        raise StageError(VALIDATING, 400, "read body", e) from e


async def _in_worker(func, *args, timeout: float):
    """Runs blocking I/O on the default executor, bounded by the request deadline."""
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(loop.run_in_executor(None, func, *args), timeout=timeout)


async def fetch(services: Services, user: str, deadline: Deadline) -> BinaryIO:
    try:
        return await _in_worker(services.store.open, object_key(user), timeout=deadline.remaining())
    except Exception as e:
        raise StageError(FETCHING, 500, "create object reader", e) from e


async def decode(stream: BinaryIO, deadline: Deadline) -> PlaybackLog:
    try:
        with closing(stream):
            return await _in_worker(decoder.decode, stream, timeout=deadline.remaining())
    except Exception as e:
        for exc_type, label in DECODE_FAILURES:
            if isinstance(e, exc_type):
                raise StageError(DECODING, 500, label, e) from e
        raise StageError(DECODING, 500, "read object", e) from e


def aggregate(playbacks: PlaybackLog, now: datetime) -> SummaryStats:
    try:
        return summarize(playbacks, now)
    except MalformedTimestampError as e:
        raise StageError(AGGREGATING, 500, "invalid playback timestamp", e) from e


async def notify(services: Services, stats: SummaryStats, deadline: Deadline) -> None:
    text = format_summary(stats)
    try:
        await asyncio.wait_for(services.notifier.send(text), timeout=deadline.remaining())
    except Exception as e:
        raise StageError(NOTIFYING, 500, "post message", e) from e


async def run_summary(
    services: Services,
    method: str,
    read_body: Callable[[], Awaitable[bytes]],
) -> Outcome:
    """Handles one /summary request end to end and never raises."""
    deadline = Deadline(services.timeout)
    log = logger.bind(method=method)

    with SUMMARY_DURATION.time():
        try:
            body = await _read_body(read_body) if method == "POST" else b""
            user = extract_user(method, body)
            log = log.bind(user=user)

            stream = await fetch(services, user, deadline)
            playbacks = await decode(stream, deadline)
            stats = aggregate(playbacks, services.clock())
            log = log.bind(
                summary_date=stats.cutoff,
                plays=stats.play_count,
                tracks=stats.distinct_track_count,
                tracks_new=stats.new_track_count,
            )
            await notify(services, stats, deadline)

        except StageError as e:
            SUMMARIES.labels(outcome=e.stage).inc()
            log.error(
                "summary_failed",
                stage=e.stage,
                reason=e.label,
                status=e.status_code,
                error=repr(e.cause),
                exc_info=e.cause,
            )
            return Outcome(e.status_code, e.label)

    SUMMARIES.labels(outcome="ok").inc()
    log.info("posted_summary")
    return Outcome(200, "ok")
