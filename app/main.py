"""FastAPI application entrypoint for BOM intake."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from app.api.submissions import router as submissions_router
from app.core.config import get_payload_settings
from app.core.errors import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Load payload settings once the server starts."""
    logger.info("Loaded payload settings=%s", get_payload_settings().safe_for_logging())
    yield


app = FastAPI(title="BOM Intake", lifespan=lifespan)
register_error_handlers(app)
app.include_router(submissions_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
