from tubeline.db.models.like import Like
from tubeline.db.models.subscription import Subscription
from tubeline.db.models.tweet import Tweet
from tubeline.db.models.user import User
from tubeline.db.models.video import Video
from tubeline.db.models.watch_history import WatchHistoryEntry

__all__ = ["Like", "Subscription", "Tweet", "User", "Video", "WatchHistoryEntry"]
