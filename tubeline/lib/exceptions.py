"""Exception handlers rendering failures into the API error envelope.

Handlers raise Litestar's HTTP exceptions directly:

* ``ClientException`` / ``ValidationException`` - malformed or missing input (400)
* ``NotAuthorizedException`` - missing, invalid or stale credentials (401)
* ``PermissionDeniedException`` - authenticated but not the owner (403)
* ``NotFoundException`` - referenced entity absent (404)
* ``ConflictException`` - uniqueness violation (409)
* ``InternalServerException`` - store or collaborator failure (500)
"""

import logging
from typing import Any

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_409_CONFLICT, HTTP_500_INTERNAL_SERVER_ERROR

from tubeline.lib import observability
from tubeline.lib.responses import error_body

logger = logging.getLogger(__name__)


class ConflictException(HTTPException):
    """Request conflicts with existing state, e.g. a taken username."""

    status_code = HTTP_409_CONFLICT


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render an HTTP exception as ``{statusCode, data, message, success}``."""
    status_code = exc.status_code
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s %s: %s", status_code, request.method, request.url.path, detail)

    return Response(
        content=error_body(status_code, detail, errors=_extra_errors(exc)),
        status_code=status_code,
        media_type="application/json",
    )


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions as a 500 envelope, logging the traceback once."""
    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    if not observability.exception(
        "Unhandled exception on {method} {path}",
        method=request.method,
        path=request.url.path,
    ):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return Response(
        content=error_body(status_code, "Internal Server Error"),
        status_code=status_code,
        media_type="application/json",
    )


def _extra_errors(exc: HTTPException) -> list[Any]:
    extra = getattr(exc, "extra", None)
    if isinstance(extra, list):
        return extra
    if extra:
        return [extra]
    return []


EXCEPTION_HANDLERS: dict[type[Exception], Any] = {
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}
