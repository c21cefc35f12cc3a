from datetime import datetime
from uuid import UUID

from advanced_alchemy.types import DateTimeUTC
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tubeline.db.base import Base


class WatchHistoryEntry(Base):
    """One position in a user's watch history.

    A video appears at most once per user; ``watched_at`` orders the
    sequence, most recent first.
    """

    __tablename__ = "watch_history"
    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id: Mapped[UUID] = mapped_column(ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    watched_at: Mapped[datetime] = mapped_column(DateTimeUTC(timezone=True), nullable=False, index=True)
