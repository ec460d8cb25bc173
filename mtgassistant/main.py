import logging
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mtgassistant.api import boosters_router, collection_router, health_router
from mtgassistant.config import settings
from mtgassistant.models.failure import (
    KnownError,
    create_known_failure_from,
    create_unknown_failure,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("mtgassistant"),
    debug=settings.debug,
)

app.include_router(boosters_router)
app.include_router(collection_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render terminal pipeline errors as a single explained failure."""
    logger.warning("%s: %s (%s)", type(exc).__name__, exc.message, exc.detail)
    response = create_known_failure_from(exc)
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Anything else is an unknown failure with a fixed message."""
    logger.exception("Unhandled error")
    response = create_unknown_failure(exc)
    return JSONResponse(status_code=500, content=response.model_dump(mode="json"))
