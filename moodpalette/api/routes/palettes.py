"""Palette generation endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ...core.cache import CacheClient, get_cache
from ...core.config import AppSettings
from ...core.errors import ConfigurationError, InputError
from ...schemas.palettes import ErrorResponse, GeneratePalettesPayload, PaletteSchema, PalettesResponse
from ...services.orchestrator import PaletteOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["palettes"])

FALLBACK_WARNING = "Text generation is not configured; palettes were built from fallback data."


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _settings(request: Request) -> AppSettings:
    return request.app.state.settings


@router.post(
    "/generatePalettes",
    response_model=PalettesResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_palettes_endpoint(
    payload: GeneratePalettesPayload,
    request: Request,
    cache: CacheClient = Depends(get_cache),
) -> PalettesResponse | JSONResponse:
    settings = _settings(request)
    generation_request = payload.to_request(settings.default_palette_size)
    try:
        generation_request.validate()
    except InputError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    warning: str | None = None
    generator = request.app.state.generator
    if generator is None:
        exc = request.app.state.generator_error or ConfigurationError("text generation unavailable")
        if not settings.serve_fallback_without_credentials:
            logger.error("Failed to initialise text generation client: %s", exc)
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal Server Error: text generation client initialization failed.",
            )
        logger.warning("Serving fallback palettes: %s", exc)
        warning = FALLBACK_WARNING

    orchestrator = PaletteOrchestrator.from_settings(settings, cache, generator)
    try:
        palettes = await orchestrator.generate_palettes(generation_request)
    except InputError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception as exc:
        logger.exception("Error generating palettes")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to generate palettes",
            str(exc) or "Internal Server Error",
        )

    return PalettesResponse(
        palettes=[PaletteSchema.model_validate(palette) for palette in palettes],
        warning=warning,
    )
