"""Parsing of file references persisted in dashboard records.

Three shapes are stored in the wild:

* ``"bucket:path"``, written by every upload since the move to private buckets;
* legacy public object URLs, ``https://<project>/storage/v1/object/public/<bucket>/<path>``;
* bare object paths, which only make sense with a caller-supplied bucket.

Anything else starting with ``http`` is an external link and is never parsed.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

from packdash.models.storage_ref import StorageReference

logger = logging.getLogger(__name__)

LEGACY_PUBLIC_URL_RE = re.compile(r"/storage/v1/object/public/([^/]+)/(.+)\Z")

_PERCENT_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def build_storage_path(bucket: str, path: str) -> str:
    """Return the reference to persist for an object: ``"bucket:path"``."""
    return f"{bucket}:{path}"


def is_external_url(stored_value: str) -> bool:
    return stored_value.startswith("http")


def strict_unquote(value: str) -> str | None:
    """Percent-decode ``value``, returning None on a malformed escape.

    ``urllib.parse.unquote`` leaves bad escapes in place and replaces invalid
    UTF-8, so both cases are checked explicitly.
    """
    if _PERCENT_ESCAPE_RE.search(value):
        return None
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return None


def parse_reference(stored_value: str, default_bucket: str | None = None) -> StorageReference | None:
    # "bucket:path" wins over every other shape, so a non-http value with an
    # early colon is always read as structured.
    colon_idx = stored_value.find(":")
    if colon_idx > 0 and not is_external_url(stored_value) and not stored_value.startswith("/"):
        return StorageReference(bucket=stored_value[:colon_idx], path=stored_value[colon_idx + 1 :])

    match = LEGACY_PUBLIC_URL_RE.search(stored_value)
    if match:
        path = strict_unquote(match.group(2))
        if path is not None:
            return StorageReference(bucket=match.group(1), path=path)
        logger.debug("Malformed percent-encoding in legacy URL: %s", stored_value)

    if default_bucket and not is_external_url(stored_value):
        return StorageReference(bucket=default_bucket, path=stored_value)

    return None
