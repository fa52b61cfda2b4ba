"""Blob storage for customer profile images.

Two adapters behind one interface:
- S3ObjectStore: any S3-compatible service through boto3
- LocalObjectStore: plain files, for development and tests
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from customer_api.lib.logging import get_logger
from customer_api.lib.settings import Settings

logger = get_logger(__name__)


class ObjectStoreError(RuntimeError):
    """Reading or writing a blob failed."""


class ObjectNotFoundError(ObjectStoreError):
    """No blob exists under the requested key."""


class ObjectStore(ABC):
    """Abstract base class for bucket/key blob storage."""

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        """Store ``data`` under ``bucket``/``key``, replacing any previous blob.

        Raises:
            ObjectStoreError: If the write fails
        """

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """Return the blob stored under ``bucket``/``key``.

        Raises:
            ObjectNotFoundError: If nothing is stored there
            ObjectStoreError: If the read fails
        """


class S3ObjectStore(ObjectStore):
    """S3 adapter; the boto3 client is built once and reused."""

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url or None,
            region_name=settings.s3_region or None,
            aws_access_key_id=settings.s3_access_key_id or None,
            aws_secret_access_key=settings.s3_secret_access_key or None,
            config=Config(
                s3={"addressing_style": "path" if settings.s3_path_style else "auto"}
            ),
        )
        return cls(client)

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(f"failed to put s3://{bucket}/{key}: {e}") from e

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("NoSuchKey", "404", "NotFound"):
                raise ObjectNotFoundError(f"s3://{bucket}/{key} does not exist") from e
            raise ObjectStoreError(f"failed to get s3://{bucket}/{key}: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreError(f"failed to get s3://{bucket}/{key}: {e}") from e


class LocalObjectStore(ObjectStore):
    """Filesystem adapter laying blobs out as ``root/bucket/key``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, bucket: str, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        return self.root / bucket / safe_key

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ObjectStoreError(f"failed to write {path}: {e}") from e

    def get_object(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(f"{path} does not exist") from e
        except OSError as e:
            raise ObjectStoreError(f"failed to read {path}: {e}") from e


def build_object_store(settings: Settings, root: Optional[Path] = None) -> ObjectStore:
    """Create the object store selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.strip().lower()
    if backend == "s3":
        return S3ObjectStore.from_settings(settings)
    if backend == "local":
        return LocalObjectStore(root or Path(settings.local_storage_root))
    raise ValueError(
        f"Unknown storage backend: {settings.storage_backend}. "
        f"Valid options: s3, local"
    )
