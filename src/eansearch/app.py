"""FastAPI application exposing the ean-search client over HTTP."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eansearch import __version__
from eansearch.errors import ConfigurationError
from eansearch.models import ClientConfig, HealthResponse
from eansearch.routers import ean
from eansearch.services.ean_search import EANSearchClient

logger = logging.getLogger(__name__)


def _build_client() -> EANSearchClient | None:
    """Create the shared client from the environment, or None without a token."""
    try:
        return EANSearchClient(ClientConfig.from_env())
    except ConfigurationError as e:
        logger.warning("EAN lookups disabled: %s", e)
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the API client on startup."""
    app.state.ean_client = _build_client()
    yield


app = FastAPI(
    title="eansearch",
    description="EAN/GTIN/ISBN product lookup via ean-search.org",
    version=__version__,
    lifespan=lifespan,
)
app.state.ean_client = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ean.router, prefix="/api/ean", tags=["ean"])


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(version=__version__, configured=app.state.ean_client is not None)
