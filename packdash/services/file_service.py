from __future__ import annotations

import asyncio
import logging
import re

from ulid import ULID

from packdash.models.storage_ref import ResolveErrorKind, ResolveResult, StorageReference
from packdash.settings import settings
from packdash.storage.base import StorageBackend, StorageError, StorageNotFoundError
from packdash.storage.references import build_storage_path, is_external_url, parse_reference

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def make_upload_path(prefix: str, filename: str) -> str:
    """Object path for an uploaded file: ``<prefix>/<ULID>-<safe filename>``."""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", filename).strip("._") or "file"
    name = f"{ULID()}-{safe_name}"
    prefix = prefix.strip("/")
    if prefix:
        return f"{prefix}/{name}"
    return name


def _fallback(
    stored_value: str,
    error: ResolveErrorKind,
    reference: StorageReference | None = None,
) -> ResolveResult:
    if is_external_url(stored_value):
        return ResolveResult(url=stored_value, reference=reference, error=error, passthrough=True)
    return ResolveResult(reference=reference, error=error)


class FileService:
    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    async def resolve(
        self,
        stored_value: str | None,
        default_bucket: str | None = None,
        expires_in: int | None = None,
    ) -> ResolveResult:
        """Resolve a stored file reference, keeping the reason for any failure.

        An unsigned ``http`` value comes back as a pass-through with the
        error kind still set.
        """
        if not stored_value:
            return ResolveResult(error=ResolveErrorKind.EMPTY)

        reference = parse_reference(stored_value, default_bucket)
        if reference is None:
            return _fallback(stored_value, ResolveErrorKind.UNPARSEABLE)

        if expires_in is None:
            expires_in = settings.signed_url_expiry

        try:
            url = await asyncio.to_thread(
                self.storage.create_signed_url, reference.bucket, reference.path, expires_in
            )
        except StorageNotFoundError as exc:
            logger.warning("Signed URL failed for %s: %s", reference, exc)
            return _fallback(stored_value, ResolveErrorKind.NOT_FOUND, reference)
        except StorageError as exc:
            logger.warning("Signed URL failed for %s: %s", reference, exc)
            return _fallback(stored_value, ResolveErrorKind.BACKEND_ERROR, reference)
        except Exception:
            logger.exception("Unexpected storage error signing %s", reference)
            return _fallback(stored_value, ResolveErrorKind.BACKEND_ERROR, reference)

        return ResolveResult(url=url, reference=reference)

    async def get_signed_url(
        self,
        stored_value: str | None,
        default_bucket: str | None = None,
        expires_in: int | None = None,
    ) -> str | None:
        result = await self.resolve(stored_value, default_bucket, expires_in)
        return result.url

    async def get_signed_urls(
        self,
        stored_values: list[str] | None,
        default_bucket: str | None = None,
        expires_in: int | None = None,
    ) -> list[str]:
        """Resolve many references concurrently; unresolvable entries are dropped."""
        if not stored_values:
            return []
        urls = await asyncio.gather(
            *(self.get_signed_url(value, default_bucket, expires_in) for value in stored_values)
        )
        return [url for url in urls if url is not None]

    async def open_file(self, stored_value: str | None, default_bucket: str | None = None) -> str | None:
        """URL to send the user to for a stored file, or None if it cannot be accessed."""
        result = await self.resolve(stored_value, default_bucket)
        if not result.ok:
            logger.info("Could not access file %r (%s)", stored_value, result.error.value)
        return result.url

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> str:
        """Store a file and return the reference to persist on the record."""
        self.storage.upload(bucket, path, data, content_type=content_type, upsert=upsert)
        reference = build_storage_path(bucket, path)
        logger.info("Stored %s (%d bytes, %s)", reference, len(data), content_type)
        return reference
