"""Main entry point for the Feratel Price API."""

import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import router
from src.config import configure_logging, get_logger, settings
from src.exceptions import OfferError, UpstreamError

logger = get_logger(__name__)


async def offer_error_handler(request: Request, exc: OfferError) -> JSONResponse:
    """Map the offer error taxonomy to HTTP responses."""
    log = logger.error if isinstance(exc, UpstreamError) else logger.info
    log(
        "Offer request failed",
        path=request.url.path,
        error=exc.message,
        error_type=type(exc).__name__,
        stage=getattr(exc, "stage", None),
        request_summary=getattr(exc, "request_summary", None),
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the traceback stays in the logs."""
    logger.error(
        "Unhandled error while serving offers",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to fetch data from Feratel", "details": str(exc)},
    )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title="Feratel Price API", version="1.0.0")

    origins = settings.api_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.add_exception_handler(OfferError, offer_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run() -> int:
    """Serve the API with uvicorn.

    Returns:
        Exit code
    """
    logger.info(
        "Starting Feratel Price API",
        environment=settings.environment,
        port=settings.api_port(),
        destination=settings.feratel.destination,
        prefix=settings.feratel.prefix,
        accommodation_id=settings.feratel_accommodation_id(),
    )
    uvicorn.run(app, host=settings.api.host, port=settings.api_port(), log_config=None)
    return 0


if __name__ == "__main__":
    # Configure logging
    configure_logging()

    sys.exit(run())
