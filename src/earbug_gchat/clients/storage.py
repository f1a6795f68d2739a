import io
from pathlib import Path
from typing import BinaryIO, Protocol

import structlog
from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage

from earbug_gchat import settings
from earbug_gchat.domains.summary.errors import UpstreamFetchError


logger = structlog.get_logger("storage")


class ObjectStore(Protocol):
    def open(self, key: str) -> BinaryIO:
        """Returns a readable binary stream for `key`; the caller closes it."""
        ...


class GCSObjectStore:
    """Reads user objects from a GCS bucket."""

    def __init__(self, bucket: storage.Bucket, timeout: float = settings.REQUEST_TIMEOUT):
        self.bucket = bucket
        self.timeout = timeout

    def open(self, key: str) -> BinaryIO:
        # Download up front so a missing object or denied read fails here,
        # not halfway through decompression.
        try:
            data = self.bucket.blob(key).download_as_bytes(timeout=self.timeout)
        except (GoogleAPIError, OSError) as e:
            raise UpstreamFetchError(f"read gs://{self.bucket.name}/{key}: {e}") from e
        return io.BytesIO(data)


class LocalObjectStore:
    """Reads user objects from a directory, for running without GCS."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def open(self, key: str) -> BinaryIO:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise UpstreamFetchError(f"key {key!r} escapes {self.root}")
        try:
            return path.open("rb")
        except OSError as e:
            raise UpstreamFetchError(f"open {path}: {e}") from e


def build_object_store() -> ObjectStore:
    if settings.EARBUG_BUCKET:
        client = storage.Client()
        logger.info("object_store_gcs", bucket=settings.EARBUG_BUCKET)
        return GCSObjectStore(client.bucket(settings.EARBUG_BUCKET), timeout=settings.REQUEST_TIMEOUT)
    if settings.EARBUG_DATA_DIR:
        logger.info("object_store_local", root=settings.EARBUG_DATA_DIR)
        return LocalObjectStore(Path(settings.EARBUG_DATA_DIR))
    raise RuntimeError("one of EARBUG_BUCKET or EARBUG_DATA_DIR must be set")
