"""Decoding of ean-search response bodies.

The service wraps single records in a one-element JSON array whose item is
either the record or an object carrying a non-empty ``error``.  Paged
operations answer with a list object that has its own ``error`` field.
The functions here resolve both conventions into either a typed record or an
exception, so nothing downstream ever sees the raw envelope.  They do no I/O.
"""

import base64
import binascii
import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from eansearch.errors import DecodeError, EmptyResponseError, EncodingError, ServiceError
from eansearch.models import ProductPage, SearchResults, ServiceReply

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_json(body: bytes | str) -> Any:
    """Parse a response body, raising :class:`DecodeError` if it is not JSON."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Response is not valid JSON: %s", e)
        raise DecodeError(f"Invalid JSON in response: {e}") from e


def _check_error(item: Any) -> None:
    """Raise :class:`ServiceError` if *item* carries a service error message."""
    if not isinstance(item, dict):
        raise DecodeError(f"Expected a JSON object, got {type(item).__name__}")
    try:
        reply = ServiceReply.model_validate(item)
    except ValidationError as e:
        raise DecodeError(f"Malformed error field: {e}") from e
    if reply.error:
        raise ServiceError(reply.error)


def decode_single(body: bytes | str, model: type[RecordT]) -> RecordT:
    """Decode a one-element-array envelope into an instance of *model*.

    Raises:
        DecodeError:        body is not JSON, not an array, or the item does
                            not fit *model*.
        ServiceError:       the item carries a non-empty ``error``.
        EmptyResponseError: the array is empty.
    """
    data = parse_json(body)
    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array, got {type(data).__name__}")
    if not data:
        raise EmptyResponseError()

    item = data[0]
    _check_error(item)
    try:
        return model.model_validate(item)
    except ValidationError as e:
        logger.warning("Unexpected %s payload: %s", model.__name__, e)
        raise DecodeError(f"Unexpected {model.__name__} payload: {e}") from e


def decode_page(body: bytes | str) -> SearchResults:
    """Decode a paged-list envelope.

    An empty product list without an error message is reported as
    :class:`EmptyResponseError`, not as an empty result.
    """
    data = parse_json(body)
    _check_error(data)
    try:
        page = ProductPage.model_validate(data)
    except ValidationError as e:
        logger.warning("Unexpected product list payload: %s", e)
        raise DecodeError(f"Unexpected product list payload: {e}") from e

    if not page.productlist:
        raise EmptyResponseError()
    return SearchResults(
        products=page.productlist,
        more=page.moreProducts,
        page=page.page,
        total=page.totalProducts,
    )


def decode_image(payload: str) -> bytes:
    """Decode a base64 image payload to raw bytes.

    Line breaks are ignored so wrapped payloads decode; any other character
    outside the base64 alphabet is an error.
    """
    payload = payload.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 image data: {e}") from e
