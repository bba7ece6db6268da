"""Main module for the price-alert notification service."""
import logging
import subprocess
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from price_alerts.config import configure_logging, get_settings
from price_alerts.container import Container, init_container
from price_alerts.db.sessions import init_db
from price_alerts.routers import (anonymous_router, notifications_router,
                                  preferences_router, realtime_router)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables at startup; close the catalog client and engine on shutdown."""
    container: Container = fastapi_app.state.container
    engine = container.engine()
    init_db(engine)
    logger.info("Price alert service started")

    yield

    try:
        await container.catalog().aclose()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error closing catalog: %s", exc)
    engine.dispose()


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


def create_app(container: Container | None = None) -> FastAPI:
    """Build the application around a DI container (tests pass an overridden one)."""
    fastapi_app = FastAPI(
        title="Price Alerts",
        description="Price-alert evaluation and notification delivery",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container or init_container()
    fastapi_app.add_exception_handler(RequestValidationError, validation_error_handler)

    fastapi_app.include_router(notifications_router)
    fastapi_app.include_router(preferences_router)
    fastapi_app.include_router(anonymous_router)
    fastapi_app.include_router(realtime_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("price_alerts.main:app", host=settings.host, port=settings.port)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    configure_logging("DEBUG")
    uvicorn.run("price_alerts.main:app", host="0.0.0.0", port=8000, reload=True)
