"""Tests for stored value encoding."""

import pytest

from hydration_tracker.domain.errors import ParseError
from hydration_tracker.services.store import (
    encode_flag,
    encode_intake_ml,
    parse_flag,
    parse_intake_ml,
)


def test_parse_intake_ml_accepts_decimal_strings() -> None:
    assert parse_intake_ml("1500") == 1500
    assert parse_intake_ml(" 250\n") == 250
    assert parse_intake_ml(encode_intake_ml(0)) == 0


@pytest.mark.parametrize("raw", ["", "abc", "-250", "12.5", "1e3", "²"])
def test_parse_intake_ml_rejects_invalid_values(raw: str) -> None:
    with pytest.raises(ParseError):
        parse_intake_ml(raw)


def test_parse_error_is_value_error() -> None:
    assert issubclass(ParseError, ValueError)


def test_flags() -> None:
    assert encode_flag(True) == "true"
    assert encode_flag(False) == "false"
    assert parse_flag("true") is True
    assert parse_flag("TRUE") is True
    assert parse_flag("1") is True
    assert parse_flag("false") is False
    assert parse_flag("garbage") is False
    assert parse_flag(None) is False
