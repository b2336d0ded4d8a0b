import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.error_handlers import register_error_handlers
from app.routers import auth, me, sightings, species

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.project_name,
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(auth.router, prefix=settings.api_v1_prefix)
app.include_router(me.router, prefix=settings.api_v1_prefix)
app.include_router(sightings.router, prefix=settings.api_v1_prefix)
app.include_router(species.router, prefix=settings.api_v1_prefix)

# Uploaded sighting photos
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(settings.photo_base_url, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Wildlife Sightings API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
