from uuid import UUID

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tubeline.db.base import Base


class Like(Base):
    """A user liking exactly one piece of content (a tweet or a video)."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_likes_liked_by_tweet"),
        UniqueConstraint("liked_by_id", "video_id", name="uq_likes_liked_by_video"),
    )

    liked_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tweet_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True, index=True
    )
    video_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"), nullable=True, index=True
    )
