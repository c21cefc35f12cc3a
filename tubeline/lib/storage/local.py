"""Local filesystem media store."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import mimetypes
from pathlib import Path, PurePosixPath

from tubeline.lib.storage.base import MediaUploadError, StoredMedia

logger = logging.getLogger(__name__)


class LocalMediaStore:
    """Store uploads on disk under content-hash keys with two levels of fan-out."""

    def __init__(self, base_path: Path, base_url: str = "/media", max_bytes: int | None = None) -> None:
        self._base_path = base_path
        self._base_url = base_url.rstrip("/")
        self._max_bytes = max_bytes

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def put(self, data: bytes, content_type: str, filename: str = "") -> StoredMedia:
        if not data:
            raise MediaUploadError("Uploaded file is empty")
        if self._max_bytes is not None and len(data) > self._max_bytes:
            raise MediaUploadError(f"Uploaded file exceeds {self._max_bytes} bytes")

        key = hashlib.sha256(data).hexdigest() + _extension(filename, content_type)
        path = self._key_to_path(key)
        try:
            await asyncio.to_thread(self._write_file, path, data)
        except OSError as exc:
            raise MediaUploadError(f"Could not write {key}") from exc

        logger.debug("Stored media %s (%d bytes)", key, len(data))
        return StoredMedia(key=key, url=self._build_url(key), content_type=content_type, size=len(data))

    async def delete(self, url: str) -> bool:
        if not self.owns(url):
            return False
        key = PurePosixPath(url).name
        await asyncio.to_thread(self._unlink, self._key_to_path(key))
        return True

    def owns(self, url: str) -> bool:
        return bool(url) and url.startswith(f"{self._base_url}/")

    # -- internal helpers --

    def _key_to_path(self, key: str) -> Path:
        if len(key) >= 4:
            return self._base_path / key[:2] / key[2:4] / key
        return self._base_path / key

    def _build_url(self, key: str) -> str:
        return f"{self._base_url}/{key[:2]}/{key[2:4]}/{key}"

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _unlink(path: Path) -> None:
        path.unlink(missing_ok=True)


def _extension(filename: str, content_type: str) -> str:
    suffix = PurePosixPath(filename).suffix.lower() if filename else ""
    if suffix and len(suffix) <= 10:
        return suffix
    return mimetypes.guess_extension(content_type or "") or ""
