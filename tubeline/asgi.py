import logging
from pathlib import Path
from typing import Any

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar
from litestar.config.cors import CORSConfig
from litestar.static_files import create_static_files_router

from tubeline.config import Settings, get_settings
from tubeline.controllers import (
    LikeController,
    SubscriptionController,
    TweetController,
    UserController,
    VideoController,
)
from tubeline.db.base import Base
from tubeline.lib import observability
from tubeline.lib.exceptions import EXCEPTION_HANDLERS
from tubeline.lib.storage import create_media_store

logger = logging.getLogger(__name__)


def _engine_config(settings: Settings) -> EngineConfig:
    if "sqlite" in settings.db.url:
        return EngineConfig(echo=settings.db.echo)

    engine_kwargs: dict[str, Any] = dict(
        pool_size=settings.db.pool_size,
        max_overflow=settings.db.pool_overflow,
        pool_timeout=settings.db.pool_timeout,
        pool_pre_ping=settings.db.pool_pre_ping,
        echo=settings.db.echo,
    )
    return EngineConfig(**engine_kwargs)


def create_app(settings: Settings | None = None) -> Litestar:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()
    observability.configure(settings)

    db_config = SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=_engine_config(settings),
    )

    media_store = create_media_store(settings.media)
    media_files_router = create_static_files_router(
        path=settings.media.base_url,
        directories=[Path(settings.media.local_path)],
        include_in_schema=False,
    )

    cors_config = CORSConfig(allow_origins=settings.cors_origins, allow_credentials=True) if settings.cors_origins else None

    async def on_startup(_app: Litestar) -> None:
        """Ensure the media directory exists and hook SQL into logfire."""
        Path(settings.media.local_path).mkdir(parents=True, exist_ok=True)
        observability.instrument_sqlalchemy(db_config.get_engine())
        logger.info("Serving media from %s at %s", settings.media.local_path, settings.media.base_url)

    app = Litestar(
        on_startup=[on_startup],
        route_handlers=[
            UserController,
            TweetController,
            SubscriptionController,
            LikeController,
            VideoController,
            media_files_router,
        ],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        cors_config=cors_config,
        exception_handlers=EXCEPTION_HANDLERS,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.media_store = media_store

    return app


app = observability.instrument_app(create_app())
