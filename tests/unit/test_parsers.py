"""Tests for HTML, salary and location parsers."""
from __future__ import annotations

import pytest

pytest.importorskip("bs4")

from jobrank.parsing.html import html_to_text, page_text
from jobrank.parsing.location import infer_work_mode, parse_location
from jobrank.parsing.salary import coerce_salary, extract_salary_range


def test_html_to_text_keeps_bullets() -> None:
    """List items become dash bullets and markup disappears."""

    html = "<p>Build things.</p><ul><li>React</li><li>TypeScript</li></ul><script>x()</script>"

    text = html_to_text(html)

    assert "Build things." in text
    assert "- React" in text
    assert "- TypeScript" in text
    assert "x()" not in text


def test_plain_text_passes_through() -> None:
    """Descriptions without markup are only trimmed."""

    assert html_to_text("  Plain text  ") == "Plain text"
    assert html_to_text("") == ""


def test_page_text_is_lowercase_visible_text() -> None:
    """Head and scripts are dropped from probed pages."""

    html = "<html><head><title>Jobs</title></head><body><h1>This Position Has Been Filled</h1></body></html>"

    assert page_text(html) == "this position has been filled"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Pay: $120k - $150k per year", (120000, 150000)),
        ("Range $85-105k", (85000, 105000)),
        ("Base $95,000 to $110,000", (95000, 110000)),
        ("Up to $70k", (70000, 70000)),
        ("Competitive pay", None),
    ],
)
def test_extract_salary_range(text: str, expected: tuple[int, int] | None) -> None:
    """Ranges with k suffixes, shared suffixes and single figures are recognised."""

    assert extract_salary_range(text) == expected


def test_coerce_salary() -> None:
    """Numbers and numeric strings coerce; junk and negatives are rejected."""

    assert coerce_salary(None) is None
    assert coerce_salary(120000.4) == 120000
    assert coerce_salary("120k") == 120000
    assert coerce_salary("$95,000") == 95000
    with pytest.raises(ValueError):
        coerce_salary(-1)
    with pytest.raises(ValueError):
        coerce_salary("negotiable")


def test_parse_location_segments() -> None:
    """City and region come from the comma segments."""

    parts = parse_location("San Francisco, CA")

    assert parts.city == "san francisco"
    assert parts.region == "ca"
    assert not parts.is_remote


def test_infer_work_mode() -> None:
    """Remote and hybrid hints are read from location text."""

    assert infer_work_mode("Remote - US") == "remote"
    assert infer_work_mode("London (Hybrid)") == "hybrid"
    assert infer_work_mode("Berlin, Germany") is None
    assert infer_work_mode(None) is None
