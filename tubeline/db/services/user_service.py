"""User account operations: registration, credentials and profile updates."""

import asyncio
import logging
from uuid import UUID

from litestar.exceptions import ClientException, NotAuthorizedException, NotFoundException
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.passwords import hash_password, verify_password
from tubeline.db.models.user import User
from tubeline.db.models.video import Video
from tubeline.lib.exceptions import ConflictException

logger = logging.getLogger(__name__)


async def get_user_by_id(db_session: AsyncSession, user_id: UUID) -> User | None:
    result = await db_session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_by_username_or_email(
    db_session: AsyncSession,
    username: str | None = None,
    email: str | None = None,
) -> User | None:
    """First user matching either identifier (both compared lowercased)."""
    filters = []
    if username:
        filters.append(User.username == username.strip().lower())
    if email:
        filters.append(User.email == email.strip().lower())
    if not filters:
        return None

    result = await db_session.execute(select(User).where(or_(*filters)).limit(1))
    return result.scalar_one_or_none()


async def create_user(
    db_session: AsyncSession,
    full_name: str,
    email: str,
    username: str,
    password: str,
    avatar: str,
    cover_image: str = "",
    bcrypt_rounds: int = 12,
) -> User:
    """Register a user. Username and email are stored lowercased.

    Raises:
        ConflictException: username or email already taken.
    """
    username = username.strip().lower()
    email = email.strip().lower()

    if await find_by_username_or_email(db_session, username=username, email=email):
        raise ConflictException("User with email or username already exists")

    password_hash = await asyncio.to_thread(hash_password, password, bcrypt_rounds)
    user = User(
        full_name=full_name.strip(),
        email=email,
        username=username,
        password_hash=password_hash,
        avatar=avatar,
        cover_image=cover_image or "",
    )
    db_session.add(user)
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictException("User with email or username already exists") from exc

    await db_session.refresh(user)
    logger.info("Registered user %s", user.username)
    return user


async def check_credentials(
    db_session: AsyncSession,
    password: str,
    username: str | None = None,
    email: str | None = None,
) -> User:
    """Resolve login credentials to a user.

    Raises:
        ClientException: neither username nor email given.
        NotFoundException: no matching user.
        NotAuthorizedException: wrong password.
    """
    if not username and not email:
        raise ClientException("username or email is required")

    user = await find_by_username_or_email(db_session, username=username, email=email)
    if user is None:
        raise NotFoundException("User does not exist")

    if not await asyncio.to_thread(verify_password, password or "", user.password_hash):
        raise NotAuthorizedException("Invalid user credentials")

    return user


async def change_password(
    db_session: AsyncSession,
    user_id: UUID,
    old_password: str,
    new_password: str,
    bcrypt_rounds: int = 12,
) -> None:
    user = await get_user_by_id(db_session, user_id)
    if user is None:
        raise NotFoundException("User does not exist")

    if not await asyncio.to_thread(verify_password, old_password or "", user.password_hash):
        raise ClientException("Invalid old password")

    user.password_hash = await asyncio.to_thread(hash_password, new_password, bcrypt_rounds)
    await db_session.commit()


async def update_account(db_session: AsyncSession, user_id: UUID, full_name: str, email: str) -> User:
    user = await get_user_by_id(db_session, user_id)
    if user is None:
        raise NotFoundException("User does not exist")

    user.full_name = full_name.strip()
    user.email = email.strip().lower()
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        raise ConflictException("Email is already in use") from exc

    await db_session.refresh(user)
    return user


async def replace_image(db_session: AsyncSession, user_id: UUID, field: str, url: str) -> tuple[User, str]:
    """Point ``avatar`` or ``cover_image`` at ``url``. Returns the user and the previous URL."""
    if field not in ("avatar", "cover_image"):
        raise ValueError(f"Not an image field: {field!r}")

    user = await get_user_by_id(db_session, user_id)
    if user is None:
        raise NotFoundException("User does not exist")

    previous = getattr(user, field) or ""
    setattr(user, field, url)
    await db_session.commit()
    await db_session.refresh(user)
    return user, previous


async def media_in_use(db_session: AsyncSession, url: str) -> bool:
    """Whether any profile or video still points at ``url``.

    Media is keyed by content hash, so identical uploads share one file.
    """
    users = await db_session.execute(
        select(User.id).where(or_(User.avatar == url, User.cover_image == url)).limit(1)
    )
    if users.scalar_one_or_none() is not None:
        return True

    videos = await db_session.execute(
        select(Video.id).where(or_(Video.video_file == url, Video.thumbnail == url)).limit(1)
    )
    return videos.scalar_one_or_none() is not None
