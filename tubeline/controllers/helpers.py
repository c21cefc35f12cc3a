"""Shared helpers for API controllers."""

import logging
from typing import Any
from uuid import UUID

from litestar import Request, Response
from litestar.datastructures import Cookie, UploadFile
from litestar.enums import RequestEncodingType
from litestar.exceptions import ClientException, SerializationException

from tubeline.auth.guards import ACCESS_COOKIE, REFRESH_COOKIE
from tubeline.auth.token_service import TokenPair
from tubeline.config import Settings
from tubeline.lib.storage import MediaStore, MediaUploadError, StoredMedia

logger = logging.getLogger(__name__)


def get_settings_from(request: Request) -> Settings:
    return request.app.state.settings


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


def parse_id(value: str, label: str) -> UUID:
    """Parse a path id, rejecting malformed values as a bad request."""
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise ClientException(f"Invalid {label} id") from None


def is_blank(*values: Any) -> bool:
    """True if any value is missing or only whitespace."""
    return any(value is None or not str(value).strip() for value in values)


def form_text(form: Any, key: str) -> str | None:
    value = form.get(key)
    return value if isinstance(value, str) else None


async def read_body_field(request: Request, key: str) -> str | None:
    """Read a string field from a JSON, urlencoded or multipart body.

    An unreadable body counts as a missing field.
    """
    media_type, _ = request.content_type
    try:
        if media_type in (RequestEncodingType.URL_ENCODED, RequestEncodingType.MULTI_PART):
            body = await request.form()
        else:
            body = await request.json()
    except SerializationException:
        logger.debug("Unreadable %s body on %s", media_type, request.url.path)
        return None

    value = body.get(key) if hasattr(body, "get") else None
    return value if isinstance(value, str) else None


async def store_upload(store: MediaStore, upload: Any, label: str) -> StoredMedia:
    """Push an uploaded form file to the media store.

    Raises:
        ClientException: no file was sent or the store rejected it.
    """
    if not isinstance(upload, UploadFile) or not upload.filename:
        raise ClientException(f"{label} file is required")

    data = await upload.read()
    try:
        return await store.put(data, upload.content_type, upload.filename)
    except MediaUploadError as exc:
        raise ClientException(f"Error while uploading {label.lower()}") from exc


def credential_cookies(pair: TokenPair, settings: Settings) -> list[Cookie]:
    auth = settings.auth
    common = {"httponly": True, "secure": auth.cookie_secure, "samesite": "lax", "path": "/"}
    return [
        Cookie(key=ACCESS_COOKIE, value=pair.access_token, max_age=auth.access_token_ttl, **common),
        Cookie(key=REFRESH_COOKIE, value=pair.refresh_token, max_age=auth.refresh_token_ttl, **common),
    ]


def clear_credential_cookies(response: Response) -> Response:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
    return response
