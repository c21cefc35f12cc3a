"""Access/refresh token lifecycle.

One refresh token is active per user: it is persisted on the user row and
every issue overwrites it, so an older refresh token stops working as soon
as a newer one exists. Rotation swaps the stored token with a single
conditional UPDATE keyed on the presented value.
"""

import logging
import secrets
from dataclasses import dataclass
from uuid import UUID

from litestar.exceptions import InternalServerException, NotAuthorizedException
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.tokens import ACCESS, REFRESH, create_signed_token, verify_signed_token
from tubeline.config import AuthConfig
from tubeline.db.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _mint_access_token(user: User, config: AuthConfig) -> str:
    claims = {
        "type": ACCESS,
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "jti": secrets.token_urlsafe(12),
    }
    return create_signed_token(claims, config.access_token_secret, config.access_token_ttl)


def _mint_refresh_token(user_id: UUID, config: AuthConfig) -> str:
    claims = {"type": REFRESH, "sub": str(user_id), "jti": secrets.token_urlsafe(12)}
    return create_signed_token(claims, config.refresh_token_secret, config.refresh_token_ttl)


def _subject(payload: dict) -> UUID | None:
    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        return None


async def issue_pair(db_session: AsyncSession, user_id: UUID, config: AuthConfig) -> TokenPair:
    """Mint a fresh pair and persist the refresh token on the user."""
    result = await db_session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise InternalServerException("Something went wrong while generating refresh and access token")

    pair = TokenPair(
        access_token=_mint_access_token(user, config),
        refresh_token=_mint_refresh_token(user.id, config),
    )
    user.refresh_token = pair.refresh_token
    await db_session.commit()
    return pair


async def rotate(db_session: AsyncSession, presented: str | None, config: AuthConfig) -> TokenPair:
    """Exchange the currently persisted refresh token for a new pair.

    Raises:
        NotAuthorizedException: missing, invalid or expired token, unknown
            subject, or a token that is no longer the persisted one.
    """
    if not presented:
        raise NotAuthorizedException("unauthorized request")

    payload = verify_signed_token(presented, config.refresh_token_secret, expected_type=REFRESH)
    user_id = _subject(payload) if payload else None
    if user_id is None:
        raise NotAuthorizedException("Invalid refresh token")

    result = await db_session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotAuthorizedException("Invalid refresh token")

    pair = TokenPair(
        access_token=_mint_access_token(user, config),
        refresh_token=_mint_refresh_token(user.id, config),
    )

    # compare-and-swap: only the request holding the current token wins
    swapped = await db_session.execute(
        update(User)
        .where(User.id == user_id, User.refresh_token == presented)
        .values(refresh_token=pair.refresh_token)
        .execution_options(synchronize_session=False)
    )
    if swapped.rowcount != 1:
        await db_session.rollback()
        logger.info("Rejected stale refresh token for user %s", user_id)
        raise NotAuthorizedException("Refresh token is expired or used")

    await db_session.commit()
    return pair


async def revoke(db_session: AsyncSession, user_id: UUID) -> None:
    """Forget the persisted refresh token so no issued refresh token rotates again."""
    await db_session.execute(
        update(User)
        .where(User.id == user_id)
        .values(refresh_token=None)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()


async def authenticate(db_session: AsyncSession, token: str | None, config: AuthConfig) -> User:
    """Resolve an access token to its user."""
    if not token:
        raise NotAuthorizedException("Unauthorized request")

    payload = verify_signed_token(token, config.access_token_secret, expected_type=ACCESS)
    user_id = _subject(payload) if payload else None
    if user_id is None:
        raise NotAuthorizedException("Invalid access token")

    result = await db_session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotAuthorizedException("Invalid access token")
    return user
