"""
Reads `<user>.pb.zstd` objects: a zstd stream wrapping a serialized earbug.v3.Store.

decode() is all-or-nothing: it either returns the whole playback log or raises
one of the DecodeError subclasses, one per step, so callers can tell a bad
framing from a corrupt stream from a schema mismatch.
"""
from typing import BinaryIO, Mapping

import zstandard
from google.protobuf.message import DecodeError as ProtoDecodeError

from earbug_gchat.domains.summary.errors import (
    DecompressionError,
    ParseError,
    ReadError,
)
from earbug_gchat.domains.summary.models import PlaybackEvent, PlaybackLog, date_prefix
from earbug_gchat.protos.store_pb2 import Store


READ_SIZE = zstandard.DECOMPRESSION_RECOMMENDED_INPUT_SIZE


class _PeekedStream:
    """Puts bytes already read from `stream` back in front of it."""

    def __init__(self, head: bytes, stream: BinaryIO):
        self._head = head
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        if not self._head:
            return self._stream.read(size)
        if size is None or size < 0:
            data, self._head = self._head + self._stream.read(), b""
            return data
        data, self._head = self._head[:size], self._head[size:]
        return data


def open_decompressor(stream: BinaryIO) -> _PeekedStream:
    """Checks the stream starts with a zstd frame and returns it ready to drain."""
    try:
        head = stream.read(len(zstandard.FRAME_HEADER))
    except OSError as e:
        raise DecompressionError(f"read frame header: {e}") from e
    if head != zstandard.FRAME_HEADER:
        raise DecompressionError(f"not a zstd frame: starts with {head!r}")
    return _PeekedStream(head, stream)


def read_all(source: _PeekedStream) -> bytes:
    """
    Decompresses every frame in `source`. The stream has to end exactly on a
    frame boundary, a frame cut short is a ReadError rather than partial output.
    """
    dctx = zstandard.ZstdDecompressor()
    dobj = None
    out = []
    try:
        while True:
            chunk = source.read(READ_SIZE)
            if not chunk:
                break
            while chunk:
                if dobj is None:
                    dobj = dctx.decompressobj()
                out.append(dobj.decompress(chunk))
                if not dobj.eof:
                    break
                # frame done, whatever is left starts the next one
                chunk = dobj.unused_data
                dobj = None
    except (zstandard.ZstdError, OSError) as e:
        raise ReadError(str(e)) from e

    if dobj is not None:
        raise ReadError("stream ends in the middle of a zstd frame")
    return b"".join(out)


def parse_store(data: bytes) -> PlaybackLog:
    store = Store()
    try:
        store.ParseFromString(data)
    except ProtoDecodeError as e:
        raise ParseError(str(e)) from e

    playbacks = {}
    for ts, played in store.playbacks.items():
        date_prefix(ts)
        playbacks[ts] = PlaybackEvent(track_id=played.track_id)
    return playbacks


def decode(stream: BinaryIO) -> PlaybackLog:
    """Decompresses and parses one stored object. `stream` is left open for its owner."""
    return parse_store(read_all(open_decompressor(stream)))


def encode(playbacks: Mapping[str, PlaybackEvent], level: int = 3) -> bytes:
    """Inverse of decode(), used to seed stores and in tests."""
    store = Store()
    for ts, played in playbacks.items():
        store.playbacks[ts].track_id = played.track_id
    cctx = zstandard.ZstdCompressor(level=level)
    return cctx.compress(store.SerializeToString())
