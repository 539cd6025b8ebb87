"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from property_registry.config import get_settings
from property_registry.db.session import dispose_engine
from property_registry.log import setup_logging
from property_registry.web import register_exception_handlers


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Configure logging on startup and release pooled connections on shutdown."""

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title=settings.app_name, lifespan=lifespan)
    register_exception_handlers(application)

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Basic health endpoint."""

        return {"status": "ok"}

    return application


app = create_app()
