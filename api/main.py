"""
FastAPI Backend for LAKECAST.

Provides REST API endpoints for:
- GLOFS run discovery and frame pass-through
- Dense wind/current/temperature grids for the map renderer
- Health checks

Version: 1.0.0
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import settings
from api.routers import glofs as glofs_router
from api.routers import grids as grids_router
from api.routers import system as system_router
from api.state import get_app_state
from lakecast.config import get_settings as get_client_settings
from lakecast.glofs.errors import FrameUnavailableError, GlofsHTTPError, NoRunAvailableError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
get_client_settings().configure_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for LAKECAST API.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title=settings.api_title,
        description="""
## Great Lakes forecast grids

Pass-through access to the GLOFS frame server plus regridded
wind, current and water-temperature fields for map rendering.

### Errors
- 502: the upstream frame server answered with a non-success status
- 404: no run / no usable lake frame for the request
- 422: invalid lake, hour, time or bbox
        """,
        version=settings.api_version,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    application.include_router(system_router.router)
    application.include_router(glofs_router.router)
    application.include_router(grids_router.router)

    @application.exception_handler(GlofsHTTPError)
    async def upstream_error_handler(request: Request, exc: GlofsHTTPError):
        logger.warning(f"Upstream error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "error": "Upstream frame server error",
                "detail": str(exc),
                "upstream_status": exc.status_code,
            },
        )

    @application.exception_handler(NoRunAvailableError)
    @application.exception_handler(FrameUnavailableError)
    async def unavailable_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=404, content={"error": "Not available", "detail": str(exc)})

    return application


# Create the application
app = create_app()

# Initialize application state (thread-safe singleton)
_ = get_app_state()


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
