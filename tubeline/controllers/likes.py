from litestar import Controller, Response, post
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.guards import Viewer, viewer_dependency
from tubeline.controllers.helpers import parse_id
from tubeline.db.services import like_service
from tubeline.lib.responses import api_response
from tubeline.views.schemas import LikeToggleRead


def _toggled(is_liked: bool, label: str) -> Response:
    message = f"{label} liked" if is_liked else f"{label} unliked"
    return api_response(LikeToggleRead(is_liked=is_liked), message)


class LikeController(Controller):
    path = "/api/v1/likes"
    dependencies = {"viewer": viewer_dependency}

    @post("/toggle/t/{tweet_id:str}", status_code=HTTP_200_OK)
    async def toggle_tweet_like(self, db_session: AsyncSession, viewer: Viewer, tweet_id: str) -> Response:
        is_liked = await like_service.toggle_tweet_like(db_session, viewer.id, parse_id(tweet_id, "tweet"))
        return _toggled(is_liked, "Tweet")

    @post("/toggle/v/{video_id:str}", status_code=HTTP_200_OK)
    async def toggle_video_like(self, db_session: AsyncSession, viewer: Viewer, video_id: str) -> Response:
        is_liked = await like_service.toggle_video_like(db_session, viewer.id, parse_id(video_id, "video"))
        return _toggled(is_liked, "Video")
