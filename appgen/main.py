import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from appgen.core.config import settings
from appgen.core.logging import configure_logging
from appgen.api.routes import router as api_router

configure_logging(settings.log_level)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    log.info("Starting API server...", extra={"session_id": "-", "step": "-"})
    yield
    log.info("Shutting down API server...", extra={"session_id": "-", "step": "-"})


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan
)
app.include_router(api_router, prefix="/v1")
