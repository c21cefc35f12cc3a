"""Video publishing, lookup and watch-history recording."""

from datetime import UTC, datetime
from uuid import UUID

from litestar.exceptions import NotFoundException
from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.db.models.video import Video
from tubeline.db.models.watch_history import WatchHistoryEntry


async def publish_video(
    db_session: AsyncSession,
    owner_id: UUID,
    title: str,
    description: str,
    video_file: str,
    thumbnail: str,
    duration: float = 0.0,
    is_published: bool = True,
) -> Video:
    video = Video(
        owner_id=owner_id,
        title=title.strip(),
        description=description.strip(),
        video_file=video_file,
        thumbnail=thumbnail,
        duration=duration,
        is_published=is_published,
    )
    db_session.add(video)
    await db_session.commit()
    await db_session.refresh(video)
    return video


async def get_visible_video(db_session: AsyncSession, video_id: UUID, viewer_id: UUID) -> Video:
    """A published video, or an unpublished one owned by the viewer."""
    result = await db_session.execute(select(Video).where(Video.id == video_id))
    video = result.scalar_one_or_none()
    if video is None or (not video.is_published and video.owner_id != viewer_id):
        raise NotFoundException("Video not found")
    return video


async def record_view(db_session: AsyncSession, video: Video, viewer_id: UUID) -> Video:
    """Count a view and move the video to the front of the viewer's history."""
    await touch_history(db_session, viewer_id, video.id, datetime.now(UTC))

    await db_session.execute(
        update(Video)
        .where(Video.id == video.id)
        .values(views=Video.views + 1)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()
    await db_session.refresh(video)
    return video


async def touch_history(db_session: AsyncSession, user_id: UUID, video_id: UUID, watched_at: datetime) -> None:
    """Upsert the (user, video) history entry with ``watched_at``."""
    entry = and_(WatchHistoryEntry.user_id == user_id, WatchHistoryEntry.video_id == video_id)
    move = (
        update(WatchHistoryEntry)
        .where(entry)
        .values(watched_at=watched_at)
        .execution_options(synchronize_session=False)
    )

    moved = await db_session.execute(move)
    if moved.rowcount:
        await db_session.commit()
        return

    db_session.add(WatchHistoryEntry(user_id=user_id, video_id=video_id, watched_at=watched_at))
    try:
        await db_session.commit()
    except IntegrityError:
        # a concurrent view inserted the entry first
        await db_session.rollback()
        await db_session.execute(move)
        await db_session.commit()
