import logging

from packdash.settings import settings
from packdash.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def get_storage() -> StorageBackend:
    backend = settings.storage_backend

    if backend == "local":
        from packdash.storage.local import LocalStorage

        logger.info("Using storage backend: local")
        return LocalStorage(settings.storage_local_path)

    if backend == "supabase":
        from packdash.storage.supabase import SupabaseStorage

        logger.info("Using storage backend: supabase url=%s", settings.supabase_url)
        return SupabaseStorage(url=settings.supabase_url, key=settings.supabase_key)

    if backend == "s3":
        from packdash.storage.s3 import S3Storage

        logger.info("Using storage backend: s3 region=%s", settings.s3_region)
        return S3Storage(
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
        )

    raise ValueError(f"Unsupported storage backend: {backend}")
