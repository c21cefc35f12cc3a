"""Viewer resolution for authenticated routes.

Controllers declare a ``viewer: Viewer`` parameter; the dependency below
turns the request's access token into that explicit value, which is then
passed on to services and the view composer.
"""

from dataclasses import dataclass
from uuid import UUID

from litestar import Request
from litestar.di import Provide
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth import token_service
from tubeline.db.models.user import User

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@dataclass(frozen=True)
class Viewer:
    """The authenticated user a request acts on behalf of."""

    id: UUID
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str

    @classmethod
    def from_user(cls, user: User) -> "Viewer":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
        )


def read_access_token(request: Request) -> str | None:
    """Access token from the cookie, falling back to a Bearer header."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token

    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


async def provide_viewer(request: Request, db_session: AsyncSession) -> Viewer:
    settings = request.app.state.settings
    user = await token_service.authenticate(db_session, read_access_token(request), settings.token_config)
    return Viewer.from_user(user)


viewer_dependency = Provide(provide_viewer)
