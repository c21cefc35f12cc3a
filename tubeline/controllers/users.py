"""Account, session and channel endpoints."""

import logging

from litestar import Controller, Request, Response, get, patch, post
from litestar.exceptions import ClientException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from tubeline.auth import token_service
from tubeline.auth.guards import REFRESH_COOKIE, Viewer, viewer_dependency
from tubeline.controllers.helpers import (
    clear_credential_cookies,
    credential_cookies,
    form_text,
    get_media_store,
    get_settings_from,
    is_blank,
    read_body_field,
    store_upload,
)
from tubeline.db.services import user_service
from tubeline.forms import AccountForm, ChangePasswordForm, LoginForm
from tubeline.lib.exceptions import ConflictException
from tubeline.lib.responses import api_response
from tubeline.views import composer
from tubeline.views.schemas import LoginResult, TokenPairRead

logger = logging.getLogger(__name__)


class UserController(Controller):
    path = "/api/v1/users"
    dependencies = {"viewer": viewer_dependency}

    @post("/register", status_code=HTTP_201_CREATED)
    async def register(self, request: Request, db_session: AsyncSession) -> Response:
        form = await request.form()
        full_name = form_text(form, "fullName")
        email = form_text(form, "email")
        username = form_text(form, "username")
        password = form_text(form, "password")

        if is_blank(full_name, email, username, password):
            raise ClientException("All fields are required")

        if await user_service.find_by_username_or_email(db_session, username=username, email=email):
            raise ConflictException("User with email or username already exists")

        store = get_media_store(request)
        avatar = await store_upload(store, form.get("avatar"), "Avatar")
        cover_upload = form.get("coverImage")
        cover_image = await store_upload(store, cover_upload, "Cover image") if cover_upload else None

        settings = get_settings_from(request)
        user = await user_service.create_user(
            db_session,
            full_name=full_name,
            email=email,
            username=username,
            password=password,
            avatar=avatar.url,
            cover_image=cover_image.url if cover_image else "",
            bcrypt_rounds=settings.auth.bcrypt_rounds,
        )
        return api_response(composer.project_user(user), "User registered successfully", HTTP_201_CREATED)

    @post("/login", status_code=HTTP_200_OK)
    async def login(self, request: Request, db_session: AsyncSession, data: LoginForm) -> Response:
        settings = get_settings_from(request)
        user = await user_service.check_credentials(
            db_session, password=data.password or "", username=data.username, email=data.email
        )
        pair = await token_service.issue_pair(db_session, user.id, settings.token_config)

        result = LoginResult(
            user=composer.project_user(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )
        return api_response(result, "User logged in successfully", cookies=credential_cookies(pair, settings))

    @post("/logout", status_code=HTTP_200_OK)
    async def logout(self, db_session: AsyncSession, viewer: Viewer) -> Response:
        await token_service.revoke(db_session, viewer.id)
        return clear_credential_cookies(api_response({}, "User logged out"))

    @post("/refresh-token", status_code=HTTP_200_OK)
    async def refresh_token(self, request: Request, db_session: AsyncSession) -> Response:
        presented = request.cookies.get(REFRESH_COOKIE) or await read_body_field(request, "refreshToken")

        settings = get_settings_from(request)
        pair = await token_service.rotate(db_session, presented, settings.token_config)
        result = TokenPairRead(access_token=pair.access_token, refresh_token=pair.refresh_token)
        return api_response(result, "Access token refreshed", cookies=credential_cookies(pair, settings))

    @post("/change-password", status_code=HTTP_200_OK)
    async def change_password(
        self, request: Request, db_session: AsyncSession, viewer: Viewer, data: ChangePasswordForm
    ) -> Response:
        if is_blank(data.new_password):
            raise ClientException("New password is required")

        await user_service.change_password(
            db_session,
            viewer.id,
            old_password=data.old_password or "",
            new_password=data.new_password,
            bcrypt_rounds=get_settings_from(request).auth.bcrypt_rounds,
        )
        return api_response({}, "Password changed successfully")

    @get("/current-user")
    async def current_user(self, db_session: AsyncSession, viewer: Viewer) -> Response:
        user = await user_service.get_user_by_id(db_session, viewer.id)
        return api_response(composer.project_user(user), "User fetched successfully")

    @patch("/update-account")
    async def update_account(self, db_session: AsyncSession, viewer: Viewer, data: AccountForm) -> Response:
        if is_blank(data.full_name, data.email):
            raise ClientException("All fields are required")

        user = await user_service.update_account(db_session, viewer.id, data.full_name, data.email)
        return api_response(composer.project_user(user), "Account details updated successfully")

    @patch("/avatar")
    async def update_avatar(self, request: Request, db_session: AsyncSession, viewer: Viewer) -> Response:
        return await self._replace_image(request, db_session, viewer, "avatar", "Avatar")

    @patch("/cover-image")
    async def update_cover_image(self, request: Request, db_session: AsyncSession, viewer: Viewer) -> Response:
        return await self._replace_image(request, db_session, viewer, "cover_image", "Cover image")

    async def _replace_image(
        self, request: Request, db_session: AsyncSession, viewer: Viewer, field: str, label: str
    ) -> Response:
        form = await request.form()
        upload_key = "avatar" if field == "avatar" else "coverImage"
        store = get_media_store(request)

        stored = await store_upload(store, form.get(upload_key), label)
        user, previous = await user_service.replace_image(db_session, viewer.id, field, stored.url)

        if previous and store.owns(previous) and not await user_service.media_in_use(db_session, previous):
            await store.delete(previous)
            logger.debug("Removed replaced %s %s", field, previous)

        return api_response(composer.project_user(user), f"{label} updated successfully")

    @get("/c/{username:str}")
    async def channel_profile(self, db_session: AsyncSession, viewer: Viewer, username: str) -> Response:
        if is_blank(username):
            raise ClientException("username is missing")

        channel = await composer.compose_channel_profile(db_session, username, viewer.id)
        return api_response(channel, "User channel fetched successfully")

    @get("/history")
    async def watch_history(self, db_session: AsyncSession, viewer: Viewer) -> Response:
        history = await composer.compose_watch_history(db_session, viewer.id)
        return api_response(history, "Watch history fetched successfully")
