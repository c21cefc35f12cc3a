import logging

from litestar import Controller, Request, Response, get, post
from litestar.exceptions import ClientException
from litestar.status_codes import HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth.guards import Viewer, viewer_dependency
from tubeline.controllers.helpers import form_text, get_media_store, is_blank, parse_id, store_upload
from tubeline.db.services import video_service
from tubeline.lib.responses import api_response
from tubeline.views import composer

logger = logging.getLogger(__name__)


def _parse_duration(value: str | None) -> float:
    if is_blank(value):
        return 0.0
    try:
        duration = float(value)
    except ValueError:
        raise ClientException("duration must be a number") from None
    if duration < 0:
        raise ClientException("duration must not be negative")
    return duration


class VideoController(Controller):
    path = "/api/v1/videos"
    dependencies = {"viewer": viewer_dependency}

    @post("/", status_code=HTTP_201_CREATED)
    async def publish_video(self, request: Request, db_session: AsyncSession, viewer: Viewer) -> Response:
        form = await request.form()
        title = form_text(form, "title")
        description = form_text(form, "description")
        if is_blank(title, description):
            raise ClientException("Title and description are required")

        duration = _parse_duration(form_text(form, "duration"))
        store = get_media_store(request)
        video_file = await store_upload(store, form.get("videoFile"), "Video")
        thumbnail = await store_upload(store, form.get("thumbnail"), "Thumbnail")

        video = await video_service.publish_video(
            db_session,
            owner_id=viewer.id,
            title=title,
            description=description,
            video_file=video_file.url,
            thumbnail=thumbnail.url,
            duration=duration,
        )
        logger.info("User %s published video %s", viewer.username, video.id)
        return api_response(composer.project_video(video), "Video published successfully", HTTP_201_CREATED)

    @get("/{video_id:str}")
    async def get_video(self, db_session: AsyncSession, viewer: Viewer, video_id: str) -> Response:
        video = await video_service.get_visible_video(db_session, parse_id(video_id, "video"), viewer.id)
        video = await video_service.record_view(db_session, video, viewer.id)
        return api_response(composer.project_video(video), "Video fetched successfully")
