"""Translate domain exceptions into JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.exceptions import SightingError

logger = logging.getLogger(__name__)


async def sighting_error_handler(request: Request, exc: SightingError) -> JSONResponse:
    logger.warning(
        f"{exc.__class__.__name__} on {request.method} {request.url.path}: "
        f"status={exc.status_code} message={exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SightingError, sighting_error_handler)
