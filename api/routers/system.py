"""
System / health API router.

Handles the root endpoint and health checks.
"""

import logging

from fastapi import APIRouter

from api.config import settings

router = APIRouter(tags=["System"])

logger = logging.getLogger(__name__)


@router.get("/")
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "glofs": "/api/glofs/...",
            "grids": "/api/grids/{field}",
        }
    }


@router.get("/api/health")
async def health_check():
    """
    Health check endpoint for load balancers.

    Returns:
        - status: Overall health status (healthy/degraded/unhealthy)
        - timestamp: Current UTC timestamp
        - version: API version
        - components: Upstream frame server status
    """
    from api.health import perform_health_check
    return await perform_health_check()
