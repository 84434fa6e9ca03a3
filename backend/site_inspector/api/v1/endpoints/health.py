"""
Health check endpoint.
"""

from fastapi import APIRouter

from site_inspector.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok", "app": settings.APP_NAME}
