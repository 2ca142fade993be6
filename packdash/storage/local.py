import logging
from pathlib import Path

from packdash.storage.base import StorageBackend, StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Buckets as directories under base_dir. Used for development and tests."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, bucket: str, path: str) -> Path:
        try:
            return self._resolve(bucket, path)
        except (ValueError, OSError) as exc:
            raise StorageError(f"Invalid object path {bucket}:{path}: {exc}") from exc

    def _resolve(self, bucket: str, path: str) -> Path:
        bucket_dir = (self.base_dir / bucket).resolve()
        if bucket_dir.parent != self.base_dir:
            raise StorageError(f"Invalid bucket name: {bucket!r}")
        resolved = (bucket_dir / path.lstrip("/")).resolve()
        if not resolved.is_relative_to(bucket_dir):
            raise StorageError(f"Path escapes bucket {bucket!r}: {path!r}")
        return resolved

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> None:
        target = self._path(bucket, path)
        if target.exists() and not upsert:
            raise StorageError(f"Object already exists: {bucket}:{path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Saved %s:%s (%d bytes) to %s", bucket, path, len(data), target)

    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        target = self._path(bucket, path)
        if not target.is_file():
            raise StorageNotFoundError(f"Object not found: {bucket}:{path}")
        url = target.as_uri()
        logger.debug("Resolved URL for %s:%s: %s", bucket, path, url)
        return url
