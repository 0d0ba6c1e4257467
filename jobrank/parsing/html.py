"""HTML sanitization utilities."""
from __future__ import annotations

from bs4 import BeautifulSoup


def html_to_text(html: str) -> str:
    """Strip markup from a job description, keeping bullets as ``- `` lines."""

    if not html or "<" not in html:
        return (html or "").strip()

    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    for li in soup.find_all("li"):
        text = li.get_text(" ", strip=True)
        li.replace_with(f"\n- {text}\n" if text else "")

    lines = []
    for line in soup.get_text("\n", strip=True).splitlines():
        normalized = " ".join(line.split())
        if normalized:
            lines.append(normalized)
    return "\n".join(lines)


def page_text(html: str) -> str:
    """Return the lower-cased visible text of a full HTML page."""

    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(["script", "style", "noscript", "head"]):
        tag.decompose()
    return " ".join(soup.get_text(" ", strip=True).split()).lower()
