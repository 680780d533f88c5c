"""Resolve a downloadable origin image URL for a discovered artwork."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Tuple

from .config import CatalogConfig
from .content import DETAIL_PAGE_STRATEGIES, Strategy, extract_image_url
from .models import Candidate, NotFound, Outcome, Success

logger = logging.getLogger("wikiart_catalog")

IMAGE_EXTENSION_PATTERN = re.compile(r"\.(?:jpe?g|png)$", re.IGNORECASE)
SIZE_VARIANT_DELIMITER = "!"


@dataclass(frozen=True)
class ResolvedImage:
    """Canonical original URL plus the derived thumbnail URL."""

    original_url: str
    thumbnail_url: str
    strategy: str


def clean_image_url(url: str) -> str:
    """Strip a ``!``-delimited size variant and make sure an image extension is present."""
    cleaned = url.split(SIZE_VARIANT_DELIMITER, 1)[0]
    if not IMAGE_EXTENSION_PATTERN.search(cleaned):
        cleaned += ".jpg"
    return cleaned


def mirror_url(host: str, artist_id: str, slug: str) -> str:
    return f"https://{host}/images/{artist_id}/{slug}.jpg"


class ImageResolver:
    """Ordered fallback chain: detail-page strategies first, then mirror probing."""

    def __init__(
        self,
        client,
        config: CatalogConfig,
        strategies: Tuple[Tuple[str, Strategy], ...] = DETAIL_PAGE_STRATEGIES,
    ) -> None:
        self._client = client
        self._config = config
        self._strategies = strategies

    def _resolved(self, url: str, strategy: str) -> Success:
        original = clean_image_url(url)
        return Success(
            ResolvedImage(
                original_url=original,
                thumbnail_url=original + self._config.thumbnail_suffix,
                strategy=strategy,
            )
        )

    async def _from_detail_page(self, candidate: Candidate) -> Outcome:
        url = self._config.detail_url(candidate.path)
        page = await self._client.fetch_text(url)
        if not isinstance(page, Success):
            logger.warning("  [%s] Error fetching artwork page: %s", candidate.title, page.detail)
            return page
        found = extract_image_url(page.value, self._strategies)
        if found is None:
            return NotFound(f"no image reference on {url}")
        strategy, image_url = found
        return self._resolved(image_url, strategy)

    async def _from_mirrors(self, artist_id: str, candidate: Candidate) -> Outcome:
        for host in self._config.mirror_hosts:
            url = mirror_url(host, artist_id, candidate.slug)
            if await self._client.probe(url):
                return self._resolved(url, f"mirror:{host}")
        return NotFound(f"no mirror serves {candidate.slug}")

    async def resolve(self, artist_id: str, candidate: Candidate) -> Outcome:
        """Return ``Success(ResolvedImage)`` or ``NotFound``; never raises for misses."""
        outcome = await self._from_detail_page(candidate)
        if isinstance(outcome, Success):
            return outcome
        outcome = await self._from_mirrors(artist_id, candidate)
        if isinstance(outcome, Success):
            logger.debug("  [%s] Resolved via %s", candidate.title, outcome.value.strategy)
        return outcome
