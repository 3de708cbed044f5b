"""Pydantic models for the ean-search API payloads and the HTTP proxy responses."""

import os
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator

from eansearch.errors import ConfigurationError

BASE_URL = "https://api.ean-search.org/api"
DEFAULT_TIMEOUT = 10.0
SEARCH_TIMEOUT = 180.0  # search operations can take minutes upstream
TOKEN_ENV_VAR = "EAN_SEARCH_API_TOKEN"


class Language(IntEnum):
    """Language selector understood by the service.

    The numbering has gaps; the values are the service's own codes.
    """

    ENGLISH = 1
    DANISH = 2
    GERMAN = 3
    SPANISH = 4
    FINNISH = 5
    FRENCH = 6
    ITALIAN = 8
    DUTCH = 10
    NORWEGIAN = 11
    POLISH = 12
    PORTUGUESE = 13
    SWEDISH = 15
    ANY = 99


class ClientConfig(BaseModel):
    """Immutable client configuration, built once and shared by every call."""

    model_config = ConfigDict(frozen=True)

    token: str
    base_url: str = BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    search_timeout: float = SEARCH_TIMEOUT

    @classmethod
    def from_env(cls, var: str = TOKEN_ENV_VAR) -> "ClientConfig":
        """Build a config from the token stored in environment variable *var*."""
        token = os.environ.get(var, "")
        if not token:
            raise ConfigurationError(f"{var} is not set")
        return cls(token=token)


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


class ServiceReply(BaseModel):
    """The error part shared by every upstream envelope."""

    error: str | None = ""


class Product(BaseModel):
    """A product record.

    The service sends ``categoryId`` as a numeric string; it is coerced to int.
    """

    ean: str = ""
    name: str = ""
    categoryId: NonNegativeInt = 0
    categoryName: str = ""
    issuingCountry: str = ""


class ChecksumResult(BaseModel):
    """Checksum verification result; ``valid`` arrives as ``"1"`` or ``"0"``."""

    ean: str = ""
    valid: bool = False

    @field_validator("valid", mode="before")
    @classmethod
    def _valid_flag(cls, value: object) -> object:
        # only "1" means valid on the wire
        if isinstance(value, str):
            return value == "1"
        return value


class ImageResult(BaseModel):
    """A barcode image; ``barcode`` holds base64 encoded PNG data."""

    ean: str = ""
    barcode: str = ""


class ProductPage(ServiceReply):
    """Envelope returned by the paged search operations."""

    page: NonNegativeInt = 0
    moreProducts: bool = False
    totalProducts: NonNegativeInt = 0
    productlist: list[Product] = []

    @field_validator("productlist", mode="before")
    @classmethod
    def _null_list(cls, value: object) -> object:
        return [] if value is None else value


class SearchResults(BaseModel):
    """One page of search results."""

    products: list[Product] = []
    more: bool = False
    page: int = 0
    total: int = 0


# ---------------------------------------------------------------------------
# HTTP proxy responses
# ---------------------------------------------------------------------------


class CountryResponse(BaseModel):
    """Issuing country of an EAN."""

    ean: str
    issuingCountry: str


class ChecksumResponse(BaseModel):
    """Checksum validity of an EAN."""

    ean: str
    valid: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    configured: bool = False
