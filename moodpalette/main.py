"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.routes.health import router as health_router
from .api.routes.palettes import router as palettes_router
from .core.cache import CacheClient, build_cache
from .core.config import AppSettings, get_settings
from .core.errors import ConfigurationError
from .core.logging import configure_logging
from .services.generator import GeminiTextGenerator, TextGenerator

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    cache: CacheClient | None = None,
    generator: TextGenerator | None = None,
) -> FastAPI:
    """Application factory used by ASGI servers.

    ``cache`` and ``generator`` may be injected; otherwise they are built from
    the settings when the app starts and released when it stops.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001 - FastAPI lifespan signature
        app_cache = cache or build_cache(settings)
        await app_cache.connect()
        owned_generator: GeminiTextGenerator | None = None
        app.state.generator_error = None
        if generator is not None:
            app.state.generator = generator
        else:
            try:
                owned_generator = GeminiTextGenerator.from_settings(settings)
            except ConfigurationError as exc:
                logger.error("Text generation client unavailable: %s", exc)
                app.state.generator_error = exc
            app.state.generator = owned_generator
        app.state.cache = app_cache
        logger.info("%s started (cache backend: %s)", settings.app_name, app_cache.backend)
        try:
            yield
        finally:
            if owned_generator is not None:
                await owned_generator.aclose()
            if cache is None:
                await app_cache.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    app.include_router(health_router, prefix=f"{settings.api_prefix}/health", tags=["health"])
    app.include_router(palettes_router, prefix=settings.api_prefix)

    return app


app = create_app()
