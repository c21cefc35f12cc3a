import logging
from dataclasses import dataclass
from uuid import UUID

from litestar.exceptions import InternalServerException, NotFoundException
from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.db.models.subscription import Subscription
from tubeline.db.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionToggle:
    subscribed: bool
    subscription: Subscription | None = None


def _pair(subscriber_id: UUID, channel_id: UUID):
    return and_(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel_id)


async def get_subscription(db_session: AsyncSession, subscriber_id: UUID, channel_id: UUID) -> Subscription | None:
    result = await db_session.execute(select(Subscription).where(_pair(subscriber_id, channel_id)))
    return result.scalar_one_or_none()


async def toggle_subscription(db_session: AsyncSession, subscriber_id: UUID, channel_id: UUID) -> SubscriptionToggle:
    """Flip the (subscriber, channel) edge between absent and present.

    The delete is attempted first so an existing edge is removed in one
    statement. When nothing was deleted the edge is inserted; losing an
    insert race to a concurrent toggle hits the unique constraint and is
    reported as subscribed.
    """
    channel_exists = await db_session.execute(select(User.id).where(User.id == channel_id))
    if channel_exists.scalar_one_or_none() is None:
        raise NotFoundException("Channel not found")

    removed = await db_session.execute(
        delete(Subscription).where(_pair(subscriber_id, channel_id)).execution_options(synchronize_session=False)
    )
    if removed.rowcount:
        await db_session.commit()
        logger.debug("User %s unsubscribed from %s", subscriber_id, channel_id)
        return SubscriptionToggle(subscribed=False)

    subscription = Subscription(subscriber_id=subscriber_id, channel_id=channel_id)
    db_session.add(subscription)
    try:
        await db_session.commit()
    except IntegrityError as exc:
        await db_session.rollback()
        existing = await get_subscription(db_session, subscriber_id, channel_id)
        if existing is None:
            raise InternalServerException("Unable to subscribe to channel") from exc
        return SubscriptionToggle(subscribed=True, subscription=existing)

    await db_session.refresh(subscription)
    logger.debug("User %s subscribed to %s", subscriber_id, channel_id)
    return SubscriptionToggle(subscribed=True, subscription=subscription)
