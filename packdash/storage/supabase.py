from __future__ import annotations

import logging

import httpx
from storage3.utils import StorageException
from supabase import Client, create_client

from packdash.storage.base import StorageBackend, StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)


class SupabaseStorage(StorageBackend):
    def __init__(self, url: str = "", key: str = "", client: Client | None = None) -> None:
        if client is None:
            if not url or not key:
                raise ValueError("Supabase storage requires both a project URL and an API key")
            client = create_client(url, key)
        self.client = client

    @staticmethod
    def _translate(exc: Exception, bucket: str, path: str) -> StorageError:
        status = str(getattr(exc, "status", "") or "")
        message = str(getattr(exc, "message", "") or exc)
        if status == "404" or "not found" in message.lower():
            return StorageNotFoundError(f"Object not found: {bucket}:{path}")
        return StorageError(f"Supabase storage request failed for {bucket}:{path}: {message}")

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> None:
        file_options = {"content-type": content_type, "upsert": "true" if upsert else "false"}
        try:
            self.client.storage.from_(bucket).upload(path, data, file_options=file_options)
        except (StorageException, httpx.HTTPError, ValueError) as exc:
            raise self._translate(exc, bucket, path) from exc
        logger.info("Uploaded %s:%s (%d bytes)", bucket, path, len(data))

    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        # A non-JSON error body surfaces as a JSONDecodeError.
        try:
            response = self.client.storage.from_(bucket).create_signed_url(path, expires_in)
        except (StorageException, httpx.HTTPError, ValueError) as exc:
            raise self._translate(exc, bucket, path) from exc

        # Older storage3 releases only set "signedURL".
        url = response.get("signedUrl") or response.get("signedURL")
        if not url:
            raise StorageError(f"Supabase returned no signed URL for {bucket}:{path}")
        logger.debug("Generated signed URL for %s:%s", bucket, path)
        return url
