"""S3-compatible implementation of BlobStore.

boto3 is synchronous, so each call runs in a worker thread to keep the
event loop free while the log write is in flight.
"""

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from evergreen_api.config import Settings
from evergreen_api.errors import BlobStoreError


class S3BlobStore:
    """Writes log objects to an S3 bucket. No retries: a failed write is dropped."""

    def __init__(self, client, bucket: str, endpoint_url: str | None = None) -> None:
        self._client = client
        self._bucket = bucket
        self._endpoint_url = endpoint_url

    @classmethod
    def create(cls, settings: Settings) -> "S3BlobStore":
        session = boto3.session.Session()
        client_args = {
            "endpoint_url": settings.s3_endpoint_url,
            "region_name": settings.s3_region,
        }
        client = session.client("s3", **{k: v for k, v in client_args.items() if v})
        return cls(client=client, bucket=settings.logs_bucket, endpoint_url=settings.s3_endpoint_url)

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        if ".." in key:
            raise BlobStoreError(f"Invalid blob key: {key}")
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key.lstrip("/"),
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError(f"Failed to write {key} to bucket {self._bucket}: {e}") from e

    def status(self) -> dict[str, object]:
        return {
            "backend": "s3",
            "bucket": self._bucket,
            "endpoint": self._endpoint_url,
        }
