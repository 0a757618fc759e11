import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .core.config import get_settings
from .core.errors import ConfigurationError
from .relay_service import RelayContext, TransactionSubmitter
from .routers import relay
from .schemas.relay import RelayResponse

logger = logging.getLogger(__name__)


def build_submitter() -> TransactionSubmitter:
    """Load settings and build the submitter. Raises on any configuration problem."""
    settings = get_settings()
    return TransactionSubmitter(RelayContext.from_settings(settings))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting burn relay service...")

    if app.state.submitter is None:
        app.state.submitter = build_submitter()

    logger.info(f"Relaying from {app.state.submitter.sender}")

    yield

    logger.info("Shutting down burn relay service...")


async def invalid_body_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=RelayResponse(success=False, error=f"Invalid request body: {details}").to_json(),
    )


def create_app(submitter: Optional[TransactionSubmitter] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When no submitter is given one is built from the environment at startup,
    so a bad key, address or ABI stops the process before it serves.
    """
    app = FastAPI(
        title="Burn Relay",
        description="Relays emitBurn calls to the stealth burn registry contract",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.submitter = submitter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )
    app.add_exception_handler(RequestValidationError, invalid_body_handler)

    app.include_router(relay.router, tags=["relay"])

    @app.get("/health")
    def health_check():
        """Liveness only. Does not touch the node."""
        return {"status": "ok"}

    return app


app = create_app()


def run():
    """Console entry point: validate configuration, then serve."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.critical(f"Failed to load config: {e}")
        sys.exit(1)

    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    try:
        submitter = TransactionSubmitter(RelayContext.from_settings(settings))
    except ConfigurationError as e:
        logger.critical(f"Failed to initialise relay: {e}")
        sys.exit(1)

    logger.info(f"Server starting on {settings.HOST}:{settings.PORT}")
    uvicorn.run(create_app(submitter), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
