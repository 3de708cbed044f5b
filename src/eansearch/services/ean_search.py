"""ean-search.org API client.

Every operation is one blocking GET against :data:`BASE_URL`.  The request
is described by :data:`OPERATIONS`; the body is decoded by
:mod:`eansearch.services.envelope`.

An :class:`EANSearchClient` holds nothing but its frozen
:class:`~eansearch.models.ClientConfig`, so one instance can be shared between
threads.  To switch tokens, build a new client rather than mutating the
configuration of one that may have requests in flight.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from eansearch.errors import ConfigurationError, TransportError
from eansearch.models import (
    BASE_URL,
    DEFAULT_TIMEOUT,
    SEARCH_TIMEOUT,
    ChecksumResult,
    ClientConfig,
    ImageResult,
    Language,
    Product,
    SearchResults,
)
from eansearch.services import envelope

logger = logging.getLogger(__name__)

__all__ = [
    "BASE_URL",
    "DEFAULT_TIMEOUT",
    "OPERATIONS",
    "SEARCH_TIMEOUT",
    "EANSearchClient",
    "Operation",
    "Shape",
    "build_url",
    "set_token",
]


class Shape(str, Enum):
    """Envelope shape of an operation's response."""

    SINGLE = "single"
    PAGED = "paged"


@dataclass(frozen=True)
class Operation:
    """An upstream operation: its ``op`` name, parameters and envelope."""

    name: str
    params: tuple[str, ...]
    shape: Shape


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("barcode-lookup", ("ean", "lang"), Shape.SINGLE),
        Operation("barcode-prefix-search", ("prefix", "page", "lang"), Shape.PAGED),
        Operation("product-search", ("name", "page", "lang"), Shape.PAGED),
        Operation("category-search", ("category", "name", "page", "lang"), Shape.PAGED),
        Operation("issuing-country", ("ean",), Shape.SINGLE),
        Operation("verify-checksum", ("ean",), Shape.SINGLE),
        Operation("barcode-image", ("ean",), Shape.SINGLE),
    )
}


def set_token(token: str) -> ClientConfig:
    """Return a client configuration carrying *token*.

    Raises:
        ConfigurationError: *token* is empty.
    """
    if not token:
        raise ConfigurationError("empty token")
    return ClientConfig(token=token)


def _format_param(value: str | int) -> str:
    # IntEnum members (Language) go out as their decimal code
    if isinstance(value, int):
        return str(int(value))
    return value


def build_url(config: ClientConfig, op: str, **params: str | int) -> httpx.URL:
    """Build the request URL for operation *op*.

    Parameters are emitted after ``format``, ``token`` and ``op`` in the order
    the operation declares them; values are percent-encoded.

    Raises:
        ValueError: *op* is unknown or *params* do not match its parameters.
    """
    operation = OPERATIONS.get(op)
    if operation is None:
        raise ValueError(f"Unknown operation: {op}")
    if set(params) != set(operation.params):
        raise ValueError(f"Operation {op} takes {', '.join(operation.params)}; got {', '.join(sorted(params))}")

    query: dict[str, str] = {"format": "json", "token": config.token, "op": op}
    for key in operation.params:
        query[key] = _format_param(params[key])
    return httpx.URL(config.base_url, params=query)


class EANSearchClient:
    """Synchronous client for the ean-search.org API.

    Args:
        config:    Client configuration; see :func:`set_token`.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(self, config: ClientConfig, transport: httpx.BaseTransport | None = None) -> None:
        if not config.token:
            raise ConfigurationError("empty token")
        self.config = config
        self._transport = transport

    def _get(self, op: str, **params: str | int) -> bytes:
        """Perform the GET for *op* and return the raw body of a 2xx response."""
        url = build_url(self.config, op, **params)
        shape = OPERATIONS[op].shape
        timeout = self.config.search_timeout if shape is Shape.PAGED else self.config.timeout
        logger.debug("ean-search %s %s", op, params)
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                response = client.get(url)
        except httpx.TimeoutException as e:
            logger.warning("ean-search %s timed out: %s", op, e)
            raise TransportError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("ean-search %s failed: %s", op, e)
            raise TransportError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.warning("ean-search %s returned HTTP %d", op, response.status_code)
            raise TransportError(f"HTTP Error {response.status_code}", status_code=response.status_code)
        return response.content

    # -- single-item operations ------------------------------------------

    def barcode_lookup(self, ean: str, lang: Language = Language.ANY) -> Product:
        """Look up a single EAN/GTIN/ISBN code."""
        body = self._get("barcode-lookup", ean=ean, lang=lang)
        return envelope.decode_single(body, Product)

    def issuing_country(self, ean: str) -> str:
        """Return the country code that issued the prefix range of *ean*."""
        body = self._get("issuing-country", ean=ean)
        return envelope.decode_single(body, Product).issuingCountry

    def verify_checksum(self, ean: str) -> bool:
        """Ask the service whether the check digit of *ean* is valid."""
        body = self._get("verify-checksum", ean=ean)
        return envelope.decode_single(body, ChecksumResult).valid

    def barcode_image(self, ean: str) -> bytes:
        """Return a PNG image of the barcode for *ean*."""
        body = self._get("barcode-image", ean=ean)
        image = envelope.decode_single(body, ImageResult)
        return envelope.decode_image(image.barcode)

    # -- paged search operations -----------------------------------------

    def barcode_prefix_search(self, prefix: str, page: int = 0, lang: Language = Language.ANY) -> SearchResults:
        """Find all codes starting with *prefix*."""
        body = self._get("barcode-prefix-search", prefix=prefix, page=page, lang=lang)
        return envelope.decode_page(body)

    def product_search(self, name: str, page: int = 0, lang: Language = Language.ANY) -> SearchResults:
        """Search products by name."""
        body = self._get("product-search", name=name, page=page, lang=lang)
        return envelope.decode_page(body)

    def category_search(
        self, category: int, name: str, page: int = 0, lang: Language = Language.ANY
    ) -> SearchResults:
        """Search products by name within a category of the service's taxonomy."""
        body = self._get("category-search", category=category, name=name, page=page, lang=lang)
        return envelope.decode_page(body)
