"""Versioned API router registration."""

from fastapi import APIRouter

from .health import router as health_router
from .qr import router as qr_router
from .upi import router as upi_router
from .version import router as version_router


def create_v1_router() -> APIRouter:
    """Create and configure v1 API router"""
    router = APIRouter(prefix="/v1")

    router.include_router(health_router, tags=["health"])
    router.include_router(version_router, tags=["health"])
    router.include_router(qr_router, tags=["qr"])
    router.include_router(upi_router, tags=["upi"])

    return router
