from uuid import UUID

from litestar.exceptions import InternalServerException, NotFoundException
from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.db.models.like import Like
from tubeline.db.models.tweet import Tweet
from tubeline.db.models.video import Video


async def _toggle(db_session: AsyncSession, user_id: UUID, target_column, target_id: UUID, **target) -> bool:
    """Compare-and-delete, else insert. Returns True if the edge now exists."""
    pair = and_(Like.liked_by_id == user_id, target_column == target_id)

    removed = await db_session.execute(delete(Like).where(pair).execution_options(synchronize_session=False))
    if removed.rowcount:
        await db_session.commit()
        return False

    db_session.add(Like(liked_by_id=user_id, **target))
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        existing = await db_session.execute(select(Like.id).where(pair))
        if existing.scalar_one_or_none() is None:
            raise InternalServerException("Unable to like content") from exc
    return True


async def toggle_tweet_like(db_session: AsyncSession, user_id: UUID, tweet_id: UUID) -> bool:
    """Toggle like on a tweet. Returns True if liked, False if unliked."""
    tweet = await db_session.execute(select(Tweet.id).where(Tweet.id == tweet_id))
    if tweet.scalar_one_or_none() is None:
        raise NotFoundException("Tweet not found")
    return await _toggle(db_session, user_id, Like.tweet_id, tweet_id, tweet_id=tweet_id)


async def toggle_video_like(db_session: AsyncSession, user_id: UUID, video_id: UUID) -> bool:
    """Toggle like on a video. Returns True if liked, False if unliked."""
    video = await db_session.execute(select(Video.id).where(Video.id == video_id))
    if video.scalar_one_or_none() is None:
        raise NotFoundException("Video not found")
    return await _toggle(db_session, user_id, Like.video_id, video_id, video_id=video_id)
