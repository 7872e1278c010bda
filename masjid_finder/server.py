"""Proxy relay HTTP server (FastAPI)"""
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .features.proxy.services.relay import MasjidiRelay
from .infrastructure.config.settings import Settings
from .infrastructure.gcp.secret_manager import resolve_masjidi_api_key
from .shared.exceptions.errors import ValidationError
from .shared.logging.config import get_logger, setup_logging

settings = Settings()

setup_logging(
    level=settings.log_level,
    enable_cloud_logging=settings.gcp_logging_enabled,
    project_id=settings.gcp_project_id,
)
logger = get_logger(__name__)

app = FastAPI(
    title="Masjid Finder Proxy",
    description="Relays mosque directory searches to MasjidiAPI without exposing the API key",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_relay: Optional[MasjidiRelay] = None


def get_relay() -> MasjidiRelay:
    """Relay shared by every request, built on first use"""
    global _relay
    if _relay is None:
        _relay = MasjidiRelay(
            api_url=settings.masjidi_api_url,
            api_key=resolve_masjidi_api_key(settings),
            timeout=settings.masjidi_upstream_timeout,
        )
    return _relay


@app.on_event("startup")
async def startup_event() -> None:
    logger.info("Proxy starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Upstream: {settings.masjidi_api_url}")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    global _relay
    logger.info("Proxy shutting down")
    if _relay is not None:
        _relay.close()
        _relay = None


@app.get("/api/masjids")
def search_masjids(
    lat: Optional[str] = None,
    long: Optional[str] = None,
    dist: Optional[str] = None,
    limit: Optional[str] = None,
    relay: MasjidiRelay = Depends(get_relay),
) -> JSONResponse:
    """
    Relay a directory search

    Args:
        lat: Latitude (required)
        long: Longitude (required)
        dist: Search radius in km
        limit: Maximum records
        relay: Upstream relay

    Returns:
        JSONResponse: Upstream body, or an error envelope
    """
    result = relay.search(lat, long, dist, limit)
    return JSONResponse(status_code=result.status_code, content=result.body)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "message": "Proxy server is running"}


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Rejected {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler keeping the error envelope shape"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


def main() -> None:
    """Run the proxy with uvicorn"""
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
