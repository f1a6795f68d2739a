from typing import Optional


class EarbugError(Exception):
    """Base for everything the summary service raises on purpose."""


class ValidationError(EarbugError):
    """Caller sent a request we can't serve (wrong method, bad body, no user)."""


class UpstreamFetchError(EarbugError):
    """The object store could not hand us the user's object."""


class DeliveryError(EarbugError):
    """The chat webhook rejected or never received the message."""


class DecodeError(EarbugError):
    pass


class DecompressionError(DecodeError):
    """Input is not a zstd stream."""


class ReadError(DecodeError):
    """The zstd stream is corrupt, truncated or the source failed mid-read."""


class ParseError(DecodeError):
    """Decompressed bytes are not an earbug.v3.Store."""


class MalformedTimestampError(DecodeError):
    def __init__(self, key: str):
        super().__init__(f"playback key {key!r} does not start with a YYYY-MM-DD date")
        self.key = key


class StageError(EarbugError):
    """
    A pipeline stage failed. `label` is the only part shown to the caller,
    `cause` holds the full error for the logs.
    """

    def __init__(self, stage: str, status_code: int, label: str, cause: Optional[BaseException] = None):
        super().__init__(f"{stage}: {label}: {cause}" if cause else f"{stage}: {label}")
        self.stage = stage
        self.status_code = status_code
        self.label = label
        self.cause = cause
