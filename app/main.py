import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.routes_api import router as api_router
from app.core.config import get_settings
from app.core.exceptions import MetadataError
from app.core.request_logging import RequestIdMiddleware, get_request_id
from app.providers import ProviderRegistry, register_provider
from app.providers.omdb_provider import OMDbProvider
from app.providers.tmdb_provider import TMDBProvider

load_dotenv()

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    try:
        yield
    finally:
        # Teardown providers
        for provider in ProviderRegistry.all():
            try:
                await provider.aclose()
            except Exception as e:
                logger.error(f"Error closing provider {provider.name}: {e}")


app = FastAPI(
    title="Rerun",
    description="Pick a random episode of a TV show",
    version="0.1.0",
    lifespan=app_lifespan,
)

app.add_middleware(RequestIdMiddleware)
if settings.environment != "production":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


@app.exception_handler(MetadataError)
async def metadata_error_handler(request: Request, exc: MetadataError):
    """Catch provider failures that escape the route handlers."""
    logger.error("request_id=%s unhandled provider error: %s", get_request_id(request), exc)
    return JSONResponse(status_code=500, content={"detail": "Upstream error"})


# Register the configured provider
if settings.metadata_provider == "omdb":
    register_provider(OMDbProvider(settings))
else:
    register_provider(TMDBProvider(settings))

app.include_router(api_router)

# Built client assets, mounted last so API routes take precedence
if settings.static_dir and settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
