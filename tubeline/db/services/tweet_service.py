import logging
from uuid import UUID

from litestar.exceptions import (
    ClientException,
    InternalServerException,
    NotFoundException,
    PermissionDeniedException,
)
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.db.models.tweet import Tweet

logger = logging.getLogger(__name__)


async def create_tweet(db_session: AsyncSession, owner_id: UUID, content: str) -> Tweet:
    """Store ``content`` verbatim under ``owner_id``."""
    if not content or not content.strip():
        raise ClientException("Tweet content required")

    tweet = Tweet(owner_id=owner_id, content=content)
    db_session.add(tweet)
    await db_session.commit()
    await db_session.refresh(tweet)
    return tweet


async def get_tweet_by_id(db_session: AsyncSession, tweet_id: UUID) -> Tweet | None:
    result = await db_session.execute(select(Tweet).where(Tweet.id == tweet_id))
    return result.scalar_one_or_none()


async def get_owned_tweet(db_session: AsyncSession, tweet_id: UUID, viewer_id: UUID, action: str) -> Tweet:
    """Load a tweet the viewer is allowed to ``action``.

    Raises:
        NotFoundException: no such tweet.
        PermissionDeniedException: the viewer does not own it.
    """
    tweet = await get_tweet_by_id(db_session, tweet_id)
    if tweet is None:
        raise NotFoundException("Tweet not found")
    if tweet.owner_id != viewer_id:
        raise PermissionDeniedException(f"You are not authorized to {action} this tweet")
    return tweet


async def update_tweet(db_session: AsyncSession, tweet_id: UUID, viewer_id: UUID, content: str | None) -> Tweet:
    """Replace the content of the viewer's tweet.

    Whitespace-only content leaves the stored content untouched and still
    returns the tweet. Missing or empty content is a bad request.
    """
    tweet = await get_owned_tweet(db_session, tweet_id, viewer_id, "update")

    if not content:
        raise ClientException("Tweet content required")

    if content.strip():
        tweet.content = content
        await db_session.commit()
        await db_session.refresh(tweet)
    return tweet


async def delete_tweet(db_session: AsyncSession, tweet_id: UUID, viewer_id: UUID) -> Tweet:
    """Delete the viewer's tweet and return it as it was."""
    tweet = await get_owned_tweet(db_session, tweet_id, viewer_id, "delete")

    result = await db_session.execute(
        delete(Tweet).where(Tweet.id == tweet_id).execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db_session.rollback()
        raise InternalServerException("Something went wrong while deleting tweet")

    await db_session.commit()
    logger.info("Deleted tweet %s", tweet_id)
    return tweet
