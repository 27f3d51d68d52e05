"""Health endpoint."""

from fastapi import APIRouter, Depends

from ...core.config import Settings, get_settings

router = APIRouter()


@router.get("/healthz")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    """Liveness check."""

    return {"ok": True, "version": settings.app_version}
