from __future__ import annotations

import math
from typing import Any


def parse_number_or_zero(value: Any) -> float:
    """
    Lenient numeric parse used by every edit path.

    Blank, non-numeric or non-finite input becomes 0.0 instead of an error,
    so a half-typed field reads as "no value".
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        v = float(value)
    else:
        s = str(value).strip().replace(",", "")
        if s.endswith("%"):
            s = s[:-1].strip()
        try:
            v = float(s)
        except ValueError:
            return 0.0
    return v if math.isfinite(v) else 0.0


def parse_int_or_zero(value: Any) -> int:
    return int(parse_number_or_zero(value))


def percent_to_fraction(value: Any) -> float:
    return parse_number_or_zero(value) / 100.0


def fraction_to_percent(fraction: float) -> float:
    return round(float(fraction) * 100.0, 2)
