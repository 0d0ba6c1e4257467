"""Salary extraction helpers."""
from __future__ import annotations

import re
from typing import Optional, Tuple

_RANGE_PATTERN = re.compile(
    r"\$(?P<low>\d[\d,]*(?:\.\d+)?)\s*(?P<lowsuffix>[kK])?\s*(?:-|–|—|to)\s*\$?(?P<high>\d[\d,]*(?:\.\d+)?)\s*(?P<highsuffix>[kK])?",
    re.IGNORECASE,
)
_SINGLE_PATTERN = re.compile(r"\$(?P<value>\d[\d,]*(?:\.\d+)?)(?P<suffix>[kK])?", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"(?P<value>\d[\d,]*(?:\.\d+)?)\s*(?P<suffix>[kK])?")


def _to_int(value: str, suffix: str | None) -> int:
    number = float(value.replace(",", ""))
    if suffix and suffix.lower() == "k":
        number *= 1000
    return int(round(number))


def extract_salary_range(text: str) -> Optional[Tuple[int, int]]:
    """Return a ``(low, high)`` salary range detected within text.

    ``$85k - $105k`` and ``$85-105k`` both yield ``(85000, 105000)``; a lone
    figure yields a flat range.
    """

    if not text:
        return None

    match = _RANGE_PATTERN.search(text)
    if match:
        high_suffix = match.group("highsuffix")
        low = _to_int(match.group("low"), match.group("lowsuffix") or high_suffix)
        high = _to_int(match.group("high"), high_suffix)
        if high < low:
            low, high = high, low
        return (low, high)

    first = _SINGLE_PATTERN.search(text)
    if first is None:
        return None
    value = _to_int(first.group("value"), first.group("suffix"))
    return (value, value)


def coerce_salary(value: object) -> int | None:
    """Coerce a salary bound from a number or numeric string; ``None`` when absent."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("salary must be numeric")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PATTERN.search(str(value))
        if match is None:
            raise ValueError(f"unparseable salary: {value!r}")
        return _to_int(match.group("value"), match.group("suffix"))
    if number < 0:
        raise ValueError("salary must not be negative")
    return int(round(number))
