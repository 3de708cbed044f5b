"""EAN/barcode product lookup endpoints, proxied to ean-search.org."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

from fastapi import APIRouter, HTTPException, Query, Request, Response

from eansearch.errors import (
    ConfigurationError,
    DecodeError,
    EANSearchError,
    EmptyResponseError,
    EncodingError,
    ServiceError,
    TransportError,
)
from eansearch.models import ChecksumResponse, CountryResponse, Language, Product, SearchResults
from eansearch.services.ean_search import EANSearchClient

router = APIRouter()

T = TypeVar("T")


def _language(lang: int) -> Language:
    try:
        return Language(lang)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown language code {lang}") from None


async def _call(request: Request, func: Callable[[EANSearchClient], T]) -> T:
    """Run a blocking client call in a worker thread, mapping errors to HTTP."""
    client: EANSearchClient | None = request.app.state.ean_client
    if client is None:
        raise HTTPException(status_code=503, detail="EAN search API token not configured")
    try:
        return await asyncio.to_thread(func, client)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except (ServiceError, EmptyResponseError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (TransportError, DecodeError, EncodingError) as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except EANSearchError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/search/prefix/{prefix}", response_model=SearchResults)
async def prefix_search(
    request: Request,
    prefix: str,
    page: int = Query(0, ge=0, description="Zero-based page number"),
    lang: int = Query(Language.ANY, description="ean-search language code"),
) -> SearchResults:
    """List products whose EAN starts with *prefix*."""
    language = _language(lang)
    return await _call(request, lambda c: c.barcode_prefix_search(prefix, page, language))


@router.get("/search/name", response_model=SearchResults)
async def name_search(
    request: Request,
    name: str = Query(..., min_length=1, description="Product name to search for"),
    category: int | None = Query(None, ge=0, description="Restrict to this category id"),
    page: int = Query(0, ge=0, description="Zero-based page number"),
    lang: int = Query(Language.ANY, description="ean-search language code"),
) -> SearchResults:
    """Search products by name, optionally within one category."""
    language = _language(lang)
    if category is None:
        return await _call(request, lambda c: c.product_search(name, page, language))
    return await _call(request, lambda c: c.category_search(category, name, page, language))


@router.get("/{ean}", response_model=Product)
async def lookup_ean(
    request: Request,
    ean: str,
    lang: int = Query(Language.ANY, description="ean-search language code"),
) -> Product:
    """Look up product data by EAN/barcode."""
    language = _language(lang)
    return await _call(request, lambda c: c.barcode_lookup(ean, language))


@router.get("/{ean}/country", response_model=CountryResponse)
async def issuing_country(request: Request, ean: str) -> CountryResponse:
    """Return the country that issued the EAN's prefix range."""
    country = await _call(request, lambda c: c.issuing_country(ean))
    return CountryResponse(ean=ean, issuingCountry=country)


@router.get("/{ean}/checksum", response_model=ChecksumResponse)
async def verify_checksum(request: Request, ean: str) -> ChecksumResponse:
    """Check the EAN's check digit."""
    valid = await _call(request, lambda c: c.verify_checksum(ean))
    return ChecksumResponse(ean=ean, valid=valid)


@router.get("/{ean}/image", response_class=Response)
async def barcode_image(request: Request, ean: str) -> Response:
    """Return a PNG rendering of the barcode."""
    image = await _call(request, lambda c: c.barcode_image(ean))
    return Response(content=image, media_type="image/png")
