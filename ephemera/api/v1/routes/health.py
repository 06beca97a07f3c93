from fastapi import APIRouter

from ephemera import __version__
from ephemera.config import settings

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check():
    """
    Liveness plus the ephemeris and cache configuration in effect.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": __version__,
        "ephemeris": "swiss" if settings.EPHE_PATH else "moshier",
        "transit_cache": settings.CACHE_ENABLED,
    }
