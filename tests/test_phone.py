import pytest

from utils.phone import format_phone_number, format_phone_number_with_hyphen


@pytest.mark.parametrize("raw, expected", [
    ("+821012345678", "01012345678"),
    ("010-1234-5678", "01012345678"),
    ("1012345678", "01012345678"),
    (None, "-"),
])
def test_format_phone_number(raw, expected):
    assert format_phone_number(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("01012345678", "010-1234-5678"),
    ("0111234567", "011-123-4567"),
    ("", "-"),
])
def test_format_phone_number_with_hyphen(raw, expected):
    assert format_phone_number_with_hyphen(raw) == expected
