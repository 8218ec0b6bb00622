# src/pawprint/main.py
"""Main entry point for the Pawprint application."""

from __future__ import annotations

import logging

import socketio
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pawprint.api.v1 import comments_router, posts_router
from pawprint.core.errors import GENERIC_ERROR_MESSAGE, PawprintError
from pawprint.core.settings import settings
from pawprint.realtime import FeedNamespace, set_gateway
from pawprint.services.media import close_media_clients

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Social feed for people and the animals they look after",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")


@app.exception_handler(PawprintError)
async def handle_domain_error(request: Request, exc: PawprintError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR_MESSAGE})


# Realtime gateway shares the ASGI process with the HTTP API.
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.realtime_cors_origins,
    logger=False,
    engineio_logger=False,
)
feed_namespace = FeedNamespace()
sio.register_namespace(feed_namespace)
set_gateway(feed_namespace)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_media_clients()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
        "realtime": f"/{settings.realtime_path}",
    }


# ASGI entry point: Socket.IO traffic is served under realtime_path, everything else by FastAPI.
socket_app = socketio.ASGIApp(sio, other_asgi_app=app, socketio_path=settings.realtime_path)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pawprint.main:socket_app", host="0.0.0.0", port=8000, reload=settings.debug)
