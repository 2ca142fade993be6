from __future__ import annotations

import logging
from urllib.parse import urlsplit

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, Field

from packdash.settings import settings
from packdash.storage.references import is_external_url, parse_reference
from web.deps import get_file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files")

# Presigned S3 URLs cannot outlive 7 days.
MAX_EXPIRES_IN = 604800


class SignedUrlsRequest(BaseModel):
    refs: list[str] = []
    bucket: str | None = None
    expires_in: int | None = Field(default=None, gt=0, le=MAX_EXPIRES_IN)


def _is_allowed(ref: str, bucket: str | None) -> bool:
    """Whether a caller-supplied reference may be signed or redirected to."""
    if is_external_url(ref):
        host = urlsplit(ref).hostname
        if host is None or host.lower() not in settings.redirect_hosts():
            return False
    reference = parse_reference(ref, bucket)
    if reference is not None and reference.bucket not in settings.files_allowed_buckets:
        return False
    return True


@router.get("/open")
async def open_file(request: Request, ref: str = "", bucket: str | None = None):
    logger.info("GET /files/open ref=%r bucket=%s", ref, bucket)
    if ref and not _is_allowed(ref, bucket or None):
        logger.warning("Refused file reference %r (bucket=%s)", ref, bucket)
        return HTMLResponse("File not allowed", status_code=403)
    file_service = get_file_service(request)
    url = await file_service.open_file(ref, bucket or None)
    if url is None:
        return HTMLResponse("Could not access file", status_code=404)
    return RedirectResponse(url, status_code=302)


@router.post("/signed-urls")
async def signed_urls(request: Request, payload: SignedUrlsRequest):
    logger.info("POST /files/signed-urls count=%d bucket=%s", len(payload.refs), payload.bucket)
    bucket = payload.bucket or None
    refs = [ref for ref in payload.refs if _is_allowed(ref, bucket)]
    if len(refs) != len(payload.refs):
        logger.warning("Dropped %d refused file references", len(payload.refs) - len(refs))
    file_service = get_file_service(request)
    urls = await file_service.get_signed_urls(refs, bucket, payload.expires_in)
    return {"urls": urls}
