"""Media store protocol and common types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class MediaUploadError(Exception):
    """The media store could not accept an upload."""


@dataclass
class StoredMedia:
    """Metadata for an uploaded file."""

    key: str
    url: str
    content_type: str
    size: int


@runtime_checkable
class MediaStore(Protocol):
    """Hosts uploaded media and hands back a public URL."""

    async def put(self, data: bytes, content_type: str, filename: str = "") -> StoredMedia:
        """Store ``data`` and return where it is served from."""
        ...

    async def delete(self, url: str) -> bool:
        """Remove the file served at ``url``. Returns False if the URL is not ours."""
        ...

    def owns(self, url: str) -> bool:
        """Whether ``url`` points into this store."""
        ...
