"""Pluggable media storage for avatars, cover images and videos."""

from pathlib import Path

from tubeline.config import MediaConfig
from tubeline.lib.storage.base import MediaStore, MediaUploadError, StoredMedia
from tubeline.lib.storage.local import LocalMediaStore


def create_media_store(config: MediaConfig) -> MediaStore:
    """Instantiate the media store described by ``config``."""
    return LocalMediaStore(
        base_path=Path(config.local_path),
        base_url=config.base_url,
        max_bytes=config.max_upload_bytes,
    )


__all__ = ["LocalMediaStore", "MediaStore", "MediaUploadError", "StoredMedia", "create_media_store"]
