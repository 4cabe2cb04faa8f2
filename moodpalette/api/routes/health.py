"""Health check endpoints for monitoring."""

from fastapi import APIRouter, Depends, Request

from ...core.cache import CacheClient, get_cache

router = APIRouter()


@router.get("/", summary="Service health probe")
async def read_health(request: Request, cache: CacheClient = Depends(get_cache)) -> dict[str, object]:
    """Return service status along with the active cache backend."""
    settings = request.app.state.settings
    return {
        "status": "ok",
        "service": settings.app_name,
        "cache": {"backend": cache.backend, "reachable": await cache.connect()},
    }
