import math

import pytest

from costmodel.parsing import (
    fraction_to_percent,
    parse_int_or_zero,
    parse_number_or_zero,
    percent_to_fraction,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("1,250", 1250.0),
        ("15%", 15.0),
        (3, 3.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
        (math.inf, 0.0),
    ],
)
def test_parse_number_or_zero(raw, expected):
    assert parse_number_or_zero(raw) == expected


def test_parse_int_truncates():
    assert parse_int_or_zero("48.9") == 48
    assert parse_int_or_zero("junk") == 0


def test_percent_conversions():
    assert percent_to_fraction("50") == pytest.approx(0.5)
    assert percent_to_fraction("abc") == 0.0
    assert fraction_to_percent(0.035) == 3.5
