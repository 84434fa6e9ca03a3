"""
Site Inspector - FastAPI Application Entry Point
"""

from fastapi import FastAPI

from site_inspector.config import settings
from site_inspector.api.v1.endpoints import health, report
from site_inspector.logger import logger

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Performance and security audit for a running CMS site",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(report.router, prefix="/api/v1/report")


@app.on_event("startup")
async def startup():
    """Log configuration on startup."""
    logger.info(f"Starting {settings.APP_NAME} (snapshot: {settings.SITE_SNAPSHOT_PATH})")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }
