"""Smart Farm Upload Service.

This is the main entry point for the Smart Farm upload backend.
It stores plot, activity and general images sent from the web app and the
LINE LIFF mini-app, and serves them back as static files.

Modules:
    - uploads: Image validation, storage and deletion
    - auth: Bearer token verification
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from smartfarm.config import get_config
from smartfarm.uploads.router import router as upload_router
from smartfarm.uploads.service import UploadService
from smartfarm.uploads.storage import ensure_layout

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence verbose third-party loggers.
for _noisy in (
    "multipart",
    "python_multipart",
    "uvicorn.access",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    upload_cfg = config.upload
    ensure_layout(upload_cfg.root_dir, upload_cfg.folders)
    app.state.upload_service = UploadService(upload_cfg)

    # Static serving of stored uploads at the same path the results report.
    # A previous startup in this process may have mounted another root.
    app.router.routes[:] = [
        route for route in app.router.routes
        if getattr(route, "name", None) != "uploads"
    ]
    app.mount(
        upload_cfg.url_prefix,
        StaticFiles(directory=upload_cfg.root_dir),
        name="uploads",
    )
    logger.info(f"Serving {upload_cfg.root_dir} at {upload_cfg.url_prefix}")

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="Smart Farm Upload API",
    description="Image upload service for the Smart Farm application",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().server.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(upload_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    server = get_config().server
    uvicorn.run("smartfarm.main:app", host=server.host, port=server.port)
