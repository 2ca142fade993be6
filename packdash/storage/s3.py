from __future__ import annotations

import logging

try:
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError
except ImportError:  # pragma: no cover
    boto3 = None  # type: ignore[assignment]

from packdash.storage.base import StorageBackend, StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}


class S3Storage(StorageBackend):
    def __init__(
        self,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str = "",
    ) -> None:
        client_kwargs: dict = {
            "service_name": "s3",
            "region_name": region,
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        if boto3 is None:
            raise ImportError(
                "boto3 is required for S3 storage. "
                "Install it with: pip install packdash[s3]"
            )
        self.client = boto3.client(**client_kwargs)

    @staticmethod
    def _translate(exc: Exception, bucket: str, path: str) -> StorageError:
        if isinstance(exc, ClientError):
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return StorageNotFoundError(f"Object not found: {bucket}:{path}")
        return StorageError(f"S3 request failed for {bucket}:{path}: {exc}")

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> None:
        try:
            if not upsert and self._exists(bucket, path):
                raise StorageError(f"Object already exists: {bucket}:{path}")
            self.client.put_object(Bucket=bucket, Key=path, Body=data, ContentType=content_type)
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, bucket, path) from exc
        logger.info("Uploaded s3://%s/%s (%d bytes)", bucket, path, len(data))

    def _exists(self, bucket: str, path: str) -> bool:
        try:
            self.client.head_object(Bucket=bucket, Key=path)
            return True
        except ClientError as exc:
            if isinstance(self._translate(exc, bucket, path), StorageNotFoundError):
                return False
            raise

    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        # Presigning is offline and succeeds for missing keys, so check first.
        try:
            self.client.head_object(Bucket=bucket, Key=path)
            url = self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": path},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, bucket, path) from exc
        logger.debug("Generated presigned URL for s3://%s/%s", bucket, path)
        return url
