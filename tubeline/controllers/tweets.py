from litestar import Controller, Response, delete, get, patch, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.guards import Viewer, viewer_dependency
from tubeline.controllers.helpers import parse_id
from tubeline.db.services import tweet_service, user_service
from tubeline.forms import TweetForm
from tubeline.lib.responses import api_response
from tubeline.views import composer


class TweetController(Controller):
    path = "/api/v1/tweets"
    dependencies = {"viewer": viewer_dependency}

    @post("/", status_code=HTTP_201_CREATED)
    async def create_tweet(self, db_session: AsyncSession, viewer: Viewer, data: TweetForm) -> Response:
        tweet = await tweet_service.create_tweet(db_session, viewer.id, data.content or "")
        return api_response(composer.project_tweet(tweet), "Tweet created successfully", HTTP_201_CREATED)

    @get("/user")
    async def list_own_tweets(self, db_session: AsyncSession, viewer: Viewer) -> Response:
        feed = await composer.compose_tweet_feed(db_session, viewer.id, viewer.id)
        return api_response(feed, "Tweets fetched successfully")

    @get("/user/{user_id:str}")
    async def list_user_tweets(self, db_session: AsyncSession, viewer: Viewer, user_id: str) -> Response:
        owner_id = parse_id(user_id, "user")
        if await user_service.get_user_by_id(db_session, owner_id) is None:
            raise NotFoundException("User does not exist")

        feed = await composer.compose_tweet_feed(db_session, owner_id, viewer.id)
        return api_response(feed, "Tweets fetched successfully")

    @patch("/{tweet_id:str}")
    async def update_tweet(self, db_session: AsyncSession, viewer: Viewer, tweet_id: str, data: TweetForm) -> Response:
        tweet = await tweet_service.update_tweet(db_session, parse_id(tweet_id, "tweet"), viewer.id, data.content)
        return api_response(composer.project_tweet(tweet), "Tweet updated successfully")

    @delete("/{tweet_id:str}", status_code=HTTP_200_OK)
    async def delete_tweet(self, db_session: AsyncSession, viewer: Viewer, tweet_id: str) -> Response:
        tweet = await tweet_service.delete_tweet(db_session, parse_id(tweet_id, "tweet"), viewer.id)
        return api_response(composer.project_tweet(tweet), "Tweet deleted successfully")
