from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StorageReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: str
    path: str

    def __str__(self) -> str:
        return f"{self.bucket}:{self.path}"


class ResolveErrorKind(str, Enum):
    EMPTY = "empty"
    UNPARSEABLE = "unparseable"
    NOT_FOUND = "not_found"
    BACKEND_ERROR = "backend_error"


class ResolveResult(BaseModel):
    url: str | None = None
    reference: StorageReference | None = None
    error: ResolveErrorKind | None = None
    passthrough: bool = False  # url is the stored value itself, not a signed URL

    @property
    def ok(self) -> bool:
        return self.url is not None
