"""Configuration bundle retrieval from S3."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, BinaryIO, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from tfc_run_worker.timing import timed

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 1024 * 1024
_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class BundleFetchError(Exception):
    """Raised when a configuration bundle cannot be fetched."""


class BundleStore(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for blob stores holding packaged configuration bundles."""

    def fetch(self, key: str) -> BinaryIO: ...


class S3BundleStore:  # pylint: disable=too-few-public-methods
    """Fetch bundles from one S3 bucket."""

    def __init__(self, bucket: str, client: Any) -> None:
        self._bucket = bucket
        self._client = client

    def fetch(self, key: str) -> BinaryIO:
        """Return the object body stream for `key`; the stream is not seekable."""
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                raise BundleFetchError(
                    f"Configuration bundle not found: {self._bucket}:{key}"
                ) from exc
            raise BundleFetchError(f"Couldn't get object {self._bucket}:{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise BundleFetchError(f"Couldn't get object {self._bucket}:{key}: {exc}") from exc
        return response["Body"]


def download_bundle(store: BundleStore, key: str, destination: Path) -> Path:
    """Copy the whole bundle stream for `key` into `destination`.

    A partial file is removed when the copy fails.
    """
    with timed("download-config-bundle"):
        stream = store.fetch(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("wb") as target:
                shutil.copyfileobj(stream, target, _COPY_CHUNK_SIZE)
        except (OSError, BotoCoreError) as exc:
            destination.unlink(missing_ok=True)
            raise BundleFetchError(
                f"Couldn't write bundle {key} to {destination}: {exc}"
            ) from exc
        finally:
            stream.close()
    logger.info("Downloaded bundle %s to %s", key, destination)
    return destination
