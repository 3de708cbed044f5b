"""eansearch: client for the ean-search.org EAN/GTIN/ISBN database API."""

__version__ = "0.1.0"

from eansearch.errors import (  # noqa: E402
    ConfigurationError,
    DecodeError,
    EANSearchError,
    EmptyResponseError,
    EncodingError,
    ServiceError,
    TransportError,
)
from eansearch.models import ClientConfig, Language, Product, SearchResults  # noqa: E402
from eansearch.services.ean_search import EANSearchClient, set_token  # noqa: E402

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "EANSearchClient",
    "EANSearchError",
    "EmptyResponseError",
    "EncodingError",
    "Language",
    "Product",
    "SearchResults",
    "ServiceError",
    "TransportError",
    "__version__",
    "set_token",
]
