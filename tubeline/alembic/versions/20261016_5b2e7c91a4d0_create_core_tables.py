"""create core tables

Revision ID: 5b2e7c91a4d0
Revises:
Create Date: 2026-10-16 09:12:04.318227

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import advanced_alchemy.types


# revision identifiers, used by Alembic.
revision: str = '5b2e7c91a4d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column('sa_orm_sentinel', sa.Integer(), nullable=True),
        sa.Column('created_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
        sa.Column('updated_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('users',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('username', sa.String(length=64), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('full_name', sa.String(length=255), nullable=False),
    sa.Column('avatar', sa.String(length=1024), nullable=False),
    sa.Column('cover_image', sa.String(length=1024), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('refresh_token', sa.String(length=1024), nullable=True),
    *_audit_columns(),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_users'))
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('tweets',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('owner_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('content', sa.Text(), nullable=False),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name=op.f('fk_tweets_owner_id_users'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_tweets'))
    )
    op.create_index(op.f('ix_tweets_owner_id'), 'tweets', ['owner_id'], unique=False)

    op.create_table('videos',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('owner_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('video_file', sa.String(length=1024), nullable=False),
    sa.Column('thumbnail', sa.String(length=1024), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('duration', sa.Float(), nullable=False),
    sa.Column('views', sa.Integer(), nullable=False),
    sa.Column('is_published', sa.Boolean(), nullable=False),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name=op.f('fk_videos_owner_id_users'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_videos'))
    )
    op.create_index(op.f('ix_videos_owner_id'), 'videos', ['owner_id'], unique=False)

    op.create_table('subscriptions',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('subscriber_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('channel_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['channel_id'], ['users.id'], name=op.f('fk_subscriptions_channel_id_users'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'], name=op.f('fk_subscriptions_subscriber_id_users'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_subscriptions')),
    sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_subscriber_channel')
    )
    op.create_index(op.f('ix_subscriptions_channel_id'), 'subscriptions', ['channel_id'], unique=False)
    op.create_index(op.f('ix_subscriptions_subscriber_id'), 'subscriptions', ['subscriber_id'], unique=False)

    op.create_table('likes',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('liked_by_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('tweet_id', advanced_alchemy.types.guid.GUID(length=16), nullable=True),
    sa.Column('video_id', advanced_alchemy.types.guid.GUID(length=16), nullable=True),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['liked_by_id'], ['users.id'], name=op.f('fk_likes_liked_by_id_users'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['tweet_id'], ['tweets.id'], name=op.f('fk_likes_tweet_id_tweets'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name=op.f('fk_likes_video_id_videos'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_likes')),
    sa.UniqueConstraint('liked_by_id', 'tweet_id', name='uq_likes_liked_by_tweet'),
    sa.UniqueConstraint('liked_by_id', 'video_id', name='uq_likes_liked_by_video')
    )
    op.create_index(op.f('ix_likes_liked_by_id'), 'likes', ['liked_by_id'], unique=False)
    op.create_index(op.f('ix_likes_tweet_id'), 'likes', ['tweet_id'], unique=False)
    op.create_index(op.f('ix_likes_video_id'), 'likes', ['video_id'], unique=False)

    op.create_table('watch_history',
    sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('user_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('video_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
    sa.Column('watched_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_watch_history_user_id_users'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name=op.f('fk_watch_history_video_id_videos'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_watch_history')),
    sa.UniqueConstraint('user_id', 'video_id', name='uq_watch_history_user_video')
    )
    op.create_index(op.f('ix_watch_history_user_id'), 'watch_history', ['user_id'], unique=False)
    op.create_index(op.f('ix_watch_history_video_id'), 'watch_history', ['video_id'], unique=False)
    op.create_index(op.f('ix_watch_history_watched_at'), 'watch_history', ['watched_at'], unique=False)


def downgrade() -> None:
    for table, indexes in (
        ('watch_history', ('ix_watch_history_watched_at', 'ix_watch_history_video_id', 'ix_watch_history_user_id')),
        ('likes', ('ix_likes_video_id', 'ix_likes_tweet_id', 'ix_likes_liked_by_id')),
        ('subscriptions', ('ix_subscriptions_subscriber_id', 'ix_subscriptions_channel_id')),
        ('videos', ('ix_videos_owner_id',)),
        ('tweets', ('ix_tweets_owner_id',)),
        ('users', ('ix_users_email', 'ix_users_username')),
    ):
        for index in indexes:
            op.drop_index(op.f(index), table_name=table)
        op.drop_table(table)
