"""Uniform response envelope: ``{statusCode, data, message, success}``."""

from collections.abc import Iterable
from typing import Any

from litestar import Response
from litestar.datastructures import Cookie
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    return data


def envelope(status_code: int, data: Any, message: str = "Success") -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "data": _to_jsonable(data),
        "message": message,
        "success": status_code < 400,
    }


def error_body(status_code: int, message: str, errors: list[Any] | None = None) -> dict[str, Any]:
    body = envelope(status_code, None, message)
    if errors:
        body["errors"] = errors
    return body


def api_response(
    data: Any,
    message: str = "Success",
    status_code: int = HTTP_200_OK,
    cookies: Iterable[Cookie] | None = None,
) -> Response[dict[str, Any]]:
    """Wrap ``data`` in the envelope. Pydantic models are dumped by alias (camelCase)."""
    return Response(
        content=envelope(status_code, data, message),
        status_code=status_code,
        media_type="application/json",
        cookies=list(cookies) if cookies else None,
    )
