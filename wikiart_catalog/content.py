"""HTML extraction for listing pages and artwork detail pages."""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

from .models import UNKNOWN_YEAR, Candidate
from .utils import collapse_whitespace

ARTWORK_PATH_PATTERN = re.compile(r"^/en/.+/([^/]+)$")
EXCLUDED_PATH_MARKERS = ("/all-works", "/mode/")
YEAR_PATTERN = re.compile(r"\d{4}")

STRUCTURED_IMAGE_PATTERN = re.compile(
    r'"image"\s*:\s*"(https:(?:\\?/){2}uploads\d*\.wikiart\.org(?:\\?/)[^"]+)"'
)
ORIGIN_IMAGE_PATTERN = re.compile(
    r"(https://uploads\d*\.wikiart\.org/images/[^\"'\s]+\.(?:jpg|png))",
    re.IGNORECASE,
)

Strategy = Callable[[str], Optional[str]]


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _trailing_span(anchor: Tag) -> Optional[Tag]:
    """Return the span directly following an anchor, ignoring whitespace."""
    sibling = anchor.next_sibling
    while isinstance(sibling, NavigableString) and not sibling.strip():
        sibling = sibling.next_sibling
    if isinstance(sibling, Tag) and sibling.name == "span":
        return sibling
    return None


def _is_artwork_path(path: str) -> bool:
    return not any(marker in path for marker in EXCLUDED_PATH_MARKERS)


def _iter_candidates(soup: BeautifulSoup) -> Iterable[Candidate]:
    for anchor in soup.find_all("a", href=True):
        path = anchor["href"].strip()
        match = ARTWORK_PATH_PATTERN.match(path)
        if not match or not _is_artwork_path(path):
            continue
        if anchor.find(True) is not None:
            # Artwork links carry plain text only; nested markup is navigation.
            continue
        # get_text() has already decoded character references once.
        title = collapse_whitespace(anchor.get_text())
        if not title:
            continue

        year = UNKNOWN_YEAR
        span = _trailing_span(anchor)
        if span is not None:
            year_match = YEAR_PATTERN.search(span.get_text())
            if year_match:
                year = year_match.group(0)

        yield Candidate(path=path, slug=match.group(1), title=title, year=year)


def parse_listing(html: str) -> List[Candidate]:
    """Extract artwork candidates from a listing page, deduplicated by slug."""
    if not html:
        return []
    seen = set()
    candidates: List[Candidate] = []
    for candidate in _iter_candidates(_soup(html)):
        if candidate.slug in seen:
            continue
        seen.add(candidate.slug)
        candidates.append(candidate)
    return candidates


def extract_meta_image(html: str) -> Optional[str]:
    """Image declared in an ``og:image`` meta tag, in any attribute order."""
    soup = _soup(html)
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: "og:image"})
        if tag and tag.get("content"):
            return tag["content"].strip()
    return None


def extract_structured_data_image(html: str) -> Optional[str]:
    """Image URL field from embedded JSON data."""
    match = STRUCTURED_IMAGE_PATTERN.search(html)
    if match:
        return match.group(1).replace("\\/", "/")
    return None


def extract_itemprop_image(html: str) -> Optional[str]:
    """Image from an element annotated with ``itemprop="image"``."""
    for tag in _soup(html).find_all(attrs={"itemprop": "image"}):
        for attr in ("content", "src"):
            value = tag.get(attr)
            if value and value.strip():
                return value.strip()
    return None


def extract_origin_image_url(html: str) -> Optional[str]:
    """Any URL on the page that follows the origin's image hosting layout."""
    match = ORIGIN_IMAGE_PATTERN.search(html)
    return match.group(1) if match else None


DETAIL_PAGE_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("meta-tag", extract_meta_image),
    ("structured-data", extract_structured_data_image),
    ("itemprop", extract_itemprop_image),
    ("origin-url", extract_origin_image_url),
)


def extract_image_url(
    html: str,
    strategies: Tuple[Tuple[str, Strategy], ...] = DETAIL_PAGE_STRATEGIES,
) -> Optional[Tuple[str, str]]:
    """Run detail-page strategies in order; return ``(strategy, url)`` for the first hit."""
    for name, strategy in strategies:
        url = strategy(html)
        if url:
            return name, url
    return None
