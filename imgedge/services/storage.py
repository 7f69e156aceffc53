"""Origin object storage for the gateway.

Every backend exposes one operation, ``fetch(key)``, and classifies the
result three ways:

    found      -> OriginObject
    not found  -> ObjectNotFound   (the pipeline falls back to the edge response)
    anything   -> StorageError     (terminal, surfaced to the edge)

The SDK calls are blocking, so ``fetch`` runs them in a worker thread to
keep the event loop free while the object downloads.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from imgedge.config import get_settings
from imgedge.errors import GatewayError
from imgedge.models import OriginObject

logger = logging.getLogger(__name__)


class ObjectNotFound(Exception):
    """The key does not exist in the origin store."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object not found: {key}")
        self.key = key


class StorageError(GatewayError):
    """The origin store failed for a reason other than a missing key."""

    kind = "storage_error"


class StorageClient(ABC):
    """Abstract interface for an origin object store."""

    name: str = "abstract"

    async def fetch(self, key: str) -> OriginObject:
        data = await asyncio.to_thread(self._read, key)
        logger.debug("Fetched %s (%d bytes) from %s", key, len(data), self.name)
        return OriginObject(key=key, data=data)

    @abstractmethod
    def _read(self, key: str) -> bytes:
        """Return the object bytes or raise ObjectNotFound / StorageError."""


class S3StorageClient(StorageClient):
    name = "s3"

    _NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}

    def __init__(self, bucket: str, *, region: str | None = None, client: Any = None) -> None:
        self._bucket = bucket
        self._client = client or boto3.client("s3", region_name=region)

    def _read(self, key: str) -> bytes:
        try:
            obj = self._client.get_object(Bucket=self._bucket, Key=key)
            return obj["Body"].read()
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in self._NOT_FOUND_CODES:
                raise ObjectNotFound(key) from exc
            logger.error("S3.get_object error for %s: %s", key, exc)
            raise StorageError(f"S3 get_object failed for {key}: {code or exc}") from exc
        except BotoCoreError as exc:
            logger.error("S3 client error for %s: %s", key, exc)
            raise StorageError(f"S3 request failed for {key}: {exc}") from exc


class GCSStorageClient(StorageClient):
    name = "gcs"

    def __init__(self, bucket: str, *, client: storage.Client | None = None) -> None:
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket)

    def _read(self, key: str) -> bytes:
        blob = self._bucket.blob(key)
        try:
            return blob.download_as_bytes()
        except gcs_exceptions.NotFound as exc:
            raise ObjectNotFound(key) from exc
        except gcs_exceptions.GoogleAPIError as exc:
            logger.error("GCS download error for %s: %s", key, exc)
            raise StorageError(f"GCS download failed for {key}: {exc}") from exc


class LocalStorageClient(StorageClient):
    """Reads objects from a directory; keys are paths relative to it."""

    name = "local"

    def __init__(self, base_dir: str | Path) -> None:
        self._base = Path(base_dir).resolve()

    def _read(self, key: str) -> bytes:
        path = (self._base / key).resolve()
        if not path.is_relative_to(self._base):
            raise StorageError(f"Key escapes the origin directory: {key}")
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ObjectNotFound(key) from exc
        except OSError as exc:
            logger.error("Local read error for %s: %s", key, exc)
            raise StorageError(f"Local read failed for {key}: {exc}") from exc


# ------------------------------------------------------------------
# Backend selection
# ------------------------------------------------------------------


@lru_cache()
def get_storage_client() -> StorageClient:
    settings = get_settings()
    backend = settings.storage_backend.lower()
    if backend == "s3":
        return S3StorageClient(settings.bucket_name, region=settings.aws_region)
    if backend == "gcs":
        return GCSStorageClient(settings.bucket_name)
    if backend == "local":
        return LocalStorageClient(settings.origin_dir)
    raise ValueError(f"Unsupported storage backend: {backend}")
