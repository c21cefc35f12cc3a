from tubeline.controllers.likes import LikeController
from tubeline.controllers.subscriptions import SubscriptionController
from tubeline.controllers.tweets import TweetController
from tubeline.controllers.users import UserController
from tubeline.controllers.videos import VideoController

__all__ = ["LikeController", "SubscriptionController", "TweetController", "UserController", "VideoController"]
