"""Read-time view composition.

Every view follows the same stages, each a separate function:

* ``match_*`` selects the base rows,
* ``join_*`` loads the related rows for all base rows at once,
* folds from :mod:`tubeline.views.folds` reduce joined rows to fields,
* ``project_*`` builds the response model.

Nothing here writes to the store.
"""

from collections.abc import Iterable
from uuid import UUID

from litestar.exceptions import NotFoundException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.db.models.like import Like
from tubeline.db.models.subscription import Subscription
from tubeline.db.models.tweet import Tweet
from tubeline.db.models.user import User
from tubeline.db.models.video import Video
from tubeline.db.models.watch_history import WatchHistoryEntry
from tubeline.lib import observability
from tubeline.views.folds import (
    RelationSummary,
    first_or_none,
    fold_relation,
    group_edges,
    index_by_id,
    owner_profile,
)
from tubeline.views.schemas import (
    ChannelProfile,
    ChannelSubscriber,
    OwnerProfile,
    SubscribedChannel,
    SubscriptionRead,
    TweetFeedItem,
    TweetRead,
    UserRead,
    VideoRead,
    WatchedVideo,
)


# ---------------------------------------------------------------------------
# Match
# ---------------------------------------------------------------------------


async def match_tweets_by_owner(db_session: AsyncSession, owner_id: UUID) -> list[Tweet]:
    result = await db_session.execute(
        select(Tweet).where(Tweet.owner_id == owner_id).order_by(Tweet.created_at.asc(), Tweet.id.asc())
    )
    return list(result.scalars().all())


async def match_user_by_username(db_session: AsyncSession, username: str) -> list[User]:
    result = await db_session.execute(select(User).where(User.username == username.strip().lower()))
    return list(result.scalars().all())


async def match_history(db_session: AsyncSession, user_id: UUID) -> list[Video]:
    """The user's watched videos, most recently watched first."""
    result = await db_session.execute(
        select(Video)
        .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
        .where(WatchHistoryEntry.user_id == user_id)
        .order_by(WatchHistoryEntry.watched_at.desc())
    )
    return list(result.scalars().all())


async def match_subscriptions(
    db_session: AsyncSession,
    channel_id: UUID | None = None,
    subscriber_id: UUID | None = None,
) -> list[Subscription]:
    query = select(Subscription).order_by(Subscription.created_at.asc())
    if channel_id is not None:
        query = query.where(Subscription.channel_id == channel_id)
    if subscriber_id is not None:
        query = query.where(Subscription.subscriber_id == subscriber_id)
    result = await db_session.execute(query)
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Join
# ---------------------------------------------------------------------------


async def join_users(db_session: AsyncSession, user_ids: Iterable[UUID]) -> dict[UUID, list[User]]:
    ids = set(user_ids)
    if not ids:
        return {}
    result = await db_session.execute(select(User).where(User.id.in_(ids)))
    return index_by_id(result.scalars().all())


async def join_tweet_likes(db_session: AsyncSession, tweet_ids: Iterable[UUID]) -> dict[UUID, list[UUID]]:
    """``{tweet_id: [liked_by_id, ...]}`` for the given tweets."""
    ids = set(tweet_ids)
    if not ids:
        return {}
    result = await db_session.execute(select(Like.tweet_id, Like.liked_by_id).where(Like.tweet_id.in_(ids)))
    return group_edges(result.all())


async def join_channel_edges(db_session: AsyncSession, user_id: UUID) -> tuple[list[UUID], list[UUID]]:
    """Subscriber ids of ``user_id`` and the channel ids ``user_id`` subscribes to."""
    subscribers = await db_session.execute(
        select(Subscription.subscriber_id).where(Subscription.channel_id == user_id)
    )
    subscribed_to = await db_session.execute(
        select(Subscription.channel_id).where(Subscription.subscriber_id == user_id)
    )
    return list(subscribers.scalars().all()), list(subscribed_to.scalars().all())


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


def project_user(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar=user.avatar,
        cover_image=user.cover_image,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def project_tweet(tweet: Tweet) -> TweetRead:
    return TweetRead(
        id=tweet.id,
        owner=tweet.owner_id,
        content=tweet.content,
        created_at=tweet.created_at,
        updated_at=tweet.updated_at,
    )


def project_video(video: Video) -> VideoRead:
    return VideoRead(
        id=video.id,
        owner=video.owner_id,
        title=video.title,
        description=video.description,
        video_file=video.video_file,
        thumbnail=video.thumbnail,
        duration=video.duration,
        views=video.views,
        is_published=video.is_published,
        created_at=video.created_at,
        updated_at=video.updated_at,
    )


def project_subscription(subscription: Subscription) -> SubscriptionRead:
    return SubscriptionRead(
        id=subscription.id,
        subscriber=subscription.subscriber_id,
        channel=subscription.channel_id,
        created_at=subscription.created_at,
    )


def project_tweet_feed_item(tweet: Tweet, owner: OwnerProfile | None, likes: RelationSummary) -> TweetFeedItem:
    return TweetFeedItem(
        id=tweet.id,
        full_name=owner.full_name if owner else None,
        username=owner.username if owner else None,
        avatar=owner.avatar if owner else None,
        content=tweet.content,
        like_count=likes.count,
        is_liked=likes.viewer_has_relation,
        created_at=tweet.created_at,
    )


def project_channel_profile(
    user: User,
    subscribers: RelationSummary,
    subscribed_to_count: int,
) -> ChannelProfile:
    return ChannelProfile(
        id=user.id,
        full_name=user.full_name,
        username=user.username,
        subscribers_count=subscribers.count,
        channels_subscribed_to_count=subscribed_to_count,
        is_subscribed=subscribers.viewer_has_relation,
        avatar=user.avatar,
        cover_image=user.cover_image,
        email=user.email,
    )


def project_watched_video(video: Video, owner: OwnerProfile | None) -> WatchedVideo:
    return WatchedVideo(
        id=video.id,
        title=video.title,
        description=video.description,
        video_file=video.video_file,
        thumbnail=video.thumbnail,
        duration=video.duration,
        views=video.views,
        is_published=video.is_published,
        owner=owner,
        created_at=video.created_at,
    )


# ---------------------------------------------------------------------------
# Composed views
# ---------------------------------------------------------------------------


async def compose_tweet_feed(
    db_session: AsyncSession,
    owner_id: UUID,
    viewer_id: UUID | None,
) -> list[TweetFeedItem]:
    """Tweets by ``owner_id`` with owner profile, like count and viewer-liked flag."""
    with observability.span("compose tweet feed", owner_id=str(owner_id)):
        tweets = await match_tweets_by_owner(db_session, owner_id)
        owners = await join_users(db_session, (t.owner_id for t in tweets))
        likes = await join_tweet_likes(db_session, (t.id for t in tweets))

        return [
            project_tweet_feed_item(
                tweet,
                owner_profile(first_or_none(owners.get(tweet.owner_id, []))),
                fold_relation(likes.get(tweet.id, []), viewer_id),
            )
            for tweet in tweets
        ]


async def compose_channel_profile(
    db_session: AsyncSession,
    username: str,
    viewer_id: UUID | None,
) -> ChannelProfile:
    """Channel view of the user named ``username`` (case-insensitive).

    Raises:
        NotFoundException: no such user.
    """
    with observability.span("compose channel profile", username=username):
        user = first_or_none(await match_user_by_username(db_session, username))
        if user is None:
            raise NotFoundException("channel does not exist")

        subscriber_ids, subscribed_to_ids = await join_channel_edges(db_session, user.id)
        return project_channel_profile(
            user,
            fold_relation(subscriber_ids, viewer_id),
            fold_relation(subscribed_to_ids, None).count,
        )


async def compose_watch_history(db_session: AsyncSession, viewer_id: UUID) -> list[WatchedVideo]:
    """The viewer's watch history with each video's owner profile."""
    with observability.span("compose watch history", viewer_id=str(viewer_id)):
        videos = await match_history(db_session, viewer_id)
        owners = await join_users(db_session, (v.owner_id for v in videos))
        return [
            project_watched_video(video, owner_profile(first_or_none(owners.get(video.owner_id, []))))
            for video in videos
        ]


async def compose_channel_subscribers(db_session: AsyncSession, channel_id: UUID) -> list[ChannelSubscriber]:
    """Subscription edges into ``channel_id`` with each subscriber's profile."""
    with observability.span("compose channel subscribers", channel_id=str(channel_id)):
        edges = await match_subscriptions(db_session, channel_id=channel_id)
        users = await join_users(db_session, (e.subscriber_id for e in edges))
        return [
            ChannelSubscriber(
                **project_subscription(edge).model_dump(),
                subscriber_info=owner_profile(first_or_none(users.get(edge.subscriber_id, []))),
            )
            for edge in edges
        ]


async def compose_subscribed_channels(db_session: AsyncSession, subscriber_id: UUID) -> list[SubscribedChannel]:
    """Subscription edges out of ``subscriber_id`` with each channel's profile."""
    with observability.span("compose subscribed channels", subscriber_id=str(subscriber_id)):
        edges = await match_subscriptions(db_session, subscriber_id=subscriber_id)
        users = await join_users(db_session, (e.channel_id for e in edges))
        return [
            SubscribedChannel(
                **project_subscription(edge).model_dump(),
                channel_info=owner_profile(first_or_none(users.get(edge.channel_id, []))),
            )
            for edge in edges
        ]
