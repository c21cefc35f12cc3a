"""Response shapes. Serialized by alias, so fields go out camelCased."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserRead(ViewModel):
    """A user without credential fields."""

    id: UUID
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    created_at: datetime
    updated_at: datetime


class OwnerProfile(ViewModel):
    """Public projection of a user attached to content it owns."""

    id: UUID
    full_name: str
    username: str
    avatar: str


class TweetRead(ViewModel):
    id: UUID
    owner: UUID
    content: str
    created_at: datetime
    updated_at: datetime


class TweetFeedItem(ViewModel):
    id: UUID
    full_name: str | None
    username: str | None
    avatar: str | None
    content: str
    like_count: int
    is_liked: bool
    created_at: datetime


class ChannelProfile(ViewModel):
    id: UUID
    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    avatar: str
    cover_image: str
    email: str


class VideoRead(ViewModel):
    id: UUID
    owner: UUID
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


class WatchedVideo(ViewModel):
    id: UUID
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    owner: OwnerProfile | None
    created_at: datetime


class SubscriptionRead(ViewModel):
    id: UUID
    subscriber: UUID
    channel: UUID
    created_at: datetime


class ChannelSubscriber(SubscriptionRead):
    subscriber_info: OwnerProfile | None


class SubscribedChannel(SubscriptionRead):
    channel_info: OwnerProfile | None


class TokenPairRead(ViewModel):
    access_token: str
    refresh_token: str


class LoginResult(TokenPairRead):
    user: UserRead


class LikeToggleRead(ViewModel):
    is_liked: bool
