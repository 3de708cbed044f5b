"""Tests for response body decoding (no network)."""

import base64

import pytest

from eansearch.errors import DecodeError, EmptyResponseError, EncodingError, ServiceError
from eansearch.models import ChecksumResult, ImageResult, Product
from eansearch.services.envelope import decode_image, decode_page, decode_single, parse_json

COKE = (
    '[{"ean":"5000112637922","name":"Coca-Cola","categoryId":"73",'
    '"categoryName":"Soft drinks","issuingCountry":"GB","error":""}]'
)


def test_decode_single_product() -> None:
    product = decode_single(COKE, Product)
    assert product == Product(
        ean="5000112637922",
        name="Coca-Cola",
        categoryId=73,
        categoryName="Soft drinks",
        issuingCountry="GB",
    )


def test_category_id_large_value_keeps_precision() -> None:
    product = decode_single('[{"ean":"1","categoryId":"9007199254740993"}]', Product)
    assert product.categoryId == 9007199254740993


def test_negative_category_id_is_rejected() -> None:
    with pytest.raises(DecodeError):
        decode_single('[{"ean":"1","categoryId":"-4"}]', Product)


def test_decode_single_service_error() -> None:
    with pytest.raises(ServiceError) as exc_info:
        decode_single('[{"error":"Invalid token"}]', Product)
    assert str(exc_info.value) == "Invalid token"


def test_service_error_ignores_data_fields() -> None:
    """Data next to an error is never validated."""
    with pytest.raises(ServiceError, match="Barcode not found"):
        decode_single('[{"ean":"1","categoryId":"not-a-number","error":"Barcode not found"}]', Product)


def test_decode_single_empty_array() -> None:
    with pytest.raises(EmptyResponseError, match="No response from API"):
        decode_single("[]", Product)


@pytest.mark.parametrize("body", ["not json", b"\xff\xfe", "", "{"])
def test_decode_single_invalid_json(body) -> None:
    with pytest.raises(DecodeError):
        decode_single(body, Product)


@pytest.mark.parametrize("body", ['{"ean":"1"}', '"text"', "[42]", '[{"error": 5}]'])
def test_decode_single_wrong_shape(body: str) -> None:
    with pytest.raises(DecodeError):
        decode_single(body, Product)


@pytest.mark.parametrize(("flag", "expected"), [("1", True), ("0", False)])
def test_decode_checksum(flag: str, expected: bool) -> None:
    result = decode_single(f'[{{"ean":"123","valid":"{flag}","error":""}}]', ChecksumResult)
    assert result.valid is expected


@pytest.mark.parametrize("flag", ["", "true", "2", "yes"])
def test_checksum_only_one_is_valid(flag: str) -> None:
    result = decode_single(f'[{{"ean":"123","valid":"{flag}","error":""}}]', ChecksumResult)
    assert result.valid is False


def test_decode_page() -> None:
    body = (
        '{"page":0,"moreProducts":true,"totalProducts":2,"productlist":['
        '{"ean":"4062099900017","name":"A","categoryId":"1","categoryName":"x","issuingCountry":"DE"},'
        '{"ean":"4062099900024","name":"B","categoryId":"2","categoryName":"y","issuingCountry":"DE"}'
        '],"error":""}'
    )
    results = decode_page(body)
    assert [p.ean for p in results.products] == ["4062099900017", "4062099900024"]
    assert results.more is True
    assert results.total == 2
    assert results.products[1].categoryId == 2


def test_decode_page_empty_list_is_an_error() -> None:
    with pytest.raises(EmptyResponseError):
        decode_page('{"page":3,"moreProducts":false,"totalProducts":0,"productlist":[],"error":""}')


def test_decode_page_null_list_is_an_error() -> None:
    with pytest.raises(EmptyResponseError, match="No response from API"):
        decode_page('{"productlist":null,"error":""}')


def test_decode_page_error_wins_over_empty_list() -> None:
    with pytest.raises(ServiceError, match="Daily limit exceeded"):
        decode_page('{"productlist":[],"error":"Daily limit exceeded"}')


def test_decode_page_error_wins_over_products() -> None:
    with pytest.raises(ServiceError):
        decode_page('{"productlist":[{"ean":"1"}],"error":"Invalid token"}')


def test_decode_page_not_an_object() -> None:
    with pytest.raises(DecodeError):
        decode_page("[]")


def test_decode_image() -> None:
    png = b"\x89PNG\r\n\x1a\n\x00\x00"
    image = decode_single(f'[{{"ean":"1","barcode":"{base64.b64encode(png).decode()}"}}]', ImageResult)
    assert decode_image(image.barcode) == png


@pytest.mark.parametrize("payload", ["Zm9v\nYmFy", "Zm9v\r\nYmFy\r\n"])
def test_decode_image_ignores_line_breaks(payload: str) -> None:
    assert decode_image(payload) == b"foobar"


@pytest.mark.parametrize("payload", ["not base64!", "abc", "Zm9vé"])
def test_decode_image_malformed(payload: str) -> None:
    with pytest.raises(EncodingError):
        decode_image(payload)


def test_parse_json_accepts_bytes() -> None:
    assert parse_json(b'{"a": 1}') == {"a": 1}
