from litestar import Controller, Response, get, post
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.guards import Viewer, viewer_dependency
from tubeline.controllers.helpers import parse_id
from tubeline.db.services import subscription_service
from tubeline.lib.responses import api_response
from tubeline.views import composer


class SubscriptionController(Controller):
    path = "/api/v1/subscriptions"
    dependencies = {"viewer": viewer_dependency}

    @post("/c/{channel_id:str}", status_code=HTTP_200_OK)
    async def toggle_subscription(self, db_session: AsyncSession, viewer: Viewer, channel_id: str) -> Response:
        toggle = await subscription_service.toggle_subscription(
            db_session, viewer.id, parse_id(channel_id, "channel")
        )
        if not toggle.subscribed:
            return api_response({}, "unsubscribed")
        return api_response(composer.project_subscription(toggle.subscription), "subscribed")

    @get("/c/{channel_id:str}")
    async def channel_subscribers(self, db_session: AsyncSession, viewer: Viewer, channel_id: str) -> Response:
        subscribers = await composer.compose_channel_subscribers(db_session, parse_id(channel_id, "channel"))
        return api_response(subscribers, "Subscribers fetched successfully")

    @get("/u")
    async def subscribed_channels(self, db_session: AsyncSession, viewer: Viewer) -> Response:
        channels = await composer.compose_subscribed_channels(db_session, viewer.id)
        return api_response(channels, "Subscribed channels fetched successfully")
