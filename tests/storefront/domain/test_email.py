"""Tests for order email normalization."""

import pytest
from protean.exceptions import ValidationError
from storefront.shared.email import normalize_email


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("jane@example.com", "jane@example.com"),
        ("Jane.Doe@Example.COM", "jane.doe@example.com"),
        ("  jane@example.com\t", "jane@example.com"),
        ("jane+orders@mail.example.co.uk", "jane+orders@mail.example.co.uk"),
    ],
)
def test_valid_addresses_are_normalized(raw, expected):
    assert normalize_email(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "",
        None,
        "jane",
        "jane@",
        "@example.com",
        "jane@@example.com",
        "jane@example",
        "jane@.example.com",
        "jane..doe@example.com",
        "jane doe@example.com",
        "jane@-example.com",
        "jane<x>@example.com",
    ],
)
def test_invalid_addresses_are_rejected(raw):
    with pytest.raises(ValidationError):
        normalize_email(raw)
