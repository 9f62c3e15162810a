import pytest

from plantation.validation import (
    EstateRequest,
    TreeRequest,
    ValidationError,
    validate_estate_request,
    validate_tree_request,
)


def test_valid_estate_from_bytes():
    assert validate_estate_request(b'{"length": 10, "width": 10}') == EstateRequest(10, 10)


def test_valid_estate_from_mapping():
    assert validate_estate_request({"length": 10, "width": 20}) == EstateRequest(10, 20)


@pytest.mark.parametrize(
    "body",
    [
        b'{"length": "abc", "width": 20}',
        b'{"length": "0", "width": 20}',
        b'{"length": -5, "width": -7}',
        b'{"length": 57000, "width": 80000}',
        b'{"width": 80000}',
        b"{}",
        b"{ adjksfboiasdfhu8798 }",
        b"",
        b"[1, 2]",
        b'{"length": 10.5, "width": 10}',
        b'{"length": true, "width": 10}',
    ],
)
def test_invalid_estate_bodies(body):
    with pytest.raises(ValidationError):
        validate_estate_request(body)


def test_valid_tree():
    assert validate_tree_request(b'{"x": 5, "y": 30, "height": 15}') == TreeRequest(5, 30, 15)


def test_tree_coordinates_beyond_estate_pass_body_validation():
    assert validate_tree_request({"x": 200, "y": 100, "height": 15}) == TreeRequest(200, 100, 15)


@pytest.mark.parametrize(
    "body",
    [
        b'{"x": "invalid", "y": 10, "height": 15}',
        b'{"x": 0, "y": 0, "height": 0}',
        b'{"x": 50001, "y": 50001, "height": 8}',
        b'{"height": 15}',
        b'{"x": 5, "y": 5, "height": 55}',
        b'{"x": 3, "y": 8, "height": -10}',
        b'{"x": -3, "y": -8, "height": 8}',
        b"{}",
        b"{ asdjkasbdjlkjlk tgtrbh}",
    ],
)
def test_invalid_tree_bodies(body):
    with pytest.raises(ValidationError):
        validate_tree_request(body)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError, match="height"):
        validate_tree_request({"x": 1, "y": 1})