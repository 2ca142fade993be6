from abc import ABC, abstractmethod


class StorageError(Exception):
    """The storage backend rejected or failed a request."""


class StorageNotFoundError(StorageError):
    """The requested object does not exist in the bucket."""


class StorageBackend(ABC):
    @abstractmethod
    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        """Return a URL granting access to bucket/path for expires_in seconds."""
        ...

    @abstractmethod
    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> None:
        """Store data at bucket/path."""
        ...
