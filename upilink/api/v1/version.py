"""Version metadata endpoint."""

from fastapi import APIRouter, Depends

from ...core.config import Settings, get_settings


router = APIRouter()


@router.get("/version")
async def version(settings: Settings = Depends(get_settings)) -> dict:
    """Return service version and link defaults."""

    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "default_currency": settings.default_currency,
    }
