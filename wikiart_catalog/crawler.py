"""High-level orchestration: discover, diff, acquire in batches, checkpoint."""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .checkpoint import CheckpointWriter
from .config import Artist, CatalogConfig
from .content import parse_listing
from .errors import DiscoveryFailure
from .models import ArtistCatalog, Candidate, CatalogState, Success
from .resolver import ImageResolver
from .scheduler import BatchScheduler
from .store import MergeStore
from .worker import AcquisitionResult, AcquisitionState, AcquisitionWorker

logger = logging.getLogger("wikiart_catalog")


@dataclass
class ArtistSummary:
    """Outcome counts and timing for one artist's run."""

    artist_id: str
    name: str
    discovered: int = 0
    scheduled: int = 0
    artworks: int = 0
    total_seconds: float = 0.0
    discovery_failed: bool = False
    states: Counter = field(default_factory=Counter)

    def record(self, results: Iterable[AcquisitionResult]) -> None:
        self.states.update(result.state for result in results)

    @property
    def completed(self) -> int:
        return self.states[AcquisitionState.DONE]

    @property
    def partial(self) -> int:
        return self.states[AcquisitionState.PARTIAL]

    @property
    def skipped(self) -> int:
        return (
            self.states[AcquisitionState.SKIPPED_NO_URL]
            + self.states[AcquisitionState.SKIPPED_BAD_IMAGE]
        )

    @property
    def failed(self) -> int:
        return self.states[AcquisitionState.FAILED]


def align_state(loaded: CatalogState, artists: Iterable[Artist]) -> CatalogState:
    """One catalog per configured artist in display order; unknown artists are kept last."""
    aligned: List[ArtistCatalog] = []
    configured = set()
    for artist in artists:
        configured.add(artist.id)
        existing = loaded.get(artist.id)
        artworks = dict(existing.artworks) if existing else {}
        aligned.append(ArtistCatalog(id=artist.id, name=artist.name, artworks=artworks))
    extras = [catalog for catalog in loaded.artists if catalog.id not in configured]
    for catalog in extras:
        logger.info("Keeping %d artworks for unconfigured artist %s", len(catalog.artworks), catalog.id)
    return CatalogState(artists=aligned + extras)


async def discover_artworks(client, config: CatalogConfig, artist: Artist) -> List[Candidate]:
    """Fetch and parse the artist's listing page."""
    logger.info("Fetching artwork list for %s...", artist.id)
    page = await client.fetch_text(config.listing_url(artist.id))
    if not isinstance(page, Success):
        raise DiscoveryFailure(artist.id, page.detail)
    candidates = parse_listing(page.value)
    logger.info("Found %d artworks in text-list", len(candidates))
    return candidates


async def process_artist(
    artist: Artist,
    state: CatalogState,
    client,
    scheduler: BatchScheduler,
    writer: CheckpointWriter,
    config: CatalogConfig,
) -> ArtistSummary:
    """Bring one artist's catalog up to date, checkpointing after every batch."""
    start = time.perf_counter()
    summary = ArtistSummary(artist_id=artist.id, name=artist.name)
    logger.info("Processing artist: %s (%s)", artist.name, artist.id)

    store = MergeStore.from_catalog(artist, state.get(artist.id))
    if len(store):
        logger.info("Found %d existing artworks for %s", len(store), artist.name)

    try:
        candidates = await discover_artworks(client, config, artist)
    except DiscoveryFailure as exc:
        logger.error("Error processing artist %s: %s", artist.name, exc)
        summary.discovery_failed = True
        candidates = []

    pending = store.diff(candidates)
    summary.discovered = len(candidates)
    summary.scheduled = len(pending)
    if candidates:
        logger.info(
            "%d artworks to process (%d fully complete with thumbnails)",
            len(pending),
            len(candidates) - len(pending),
        )

    async for event in scheduler.run(store, pending):
        summary.record(event.results)
        state.upsert(event.catalog)
        writer.write(state)

    state.upsert(store.snapshot())
    writer.write(state)

    summary.artworks = len(store)
    summary.total_seconds = time.perf_counter() - start
    return summary


async def run_catalog(
    config: CatalogConfig,
    client,
    storage,
    writer: Optional[CheckpointWriter] = None,
) -> List[ArtistSummary]:
    """Process every configured artist in order against the persisted catalog."""
    writer = writer or CheckpointWriter(config.catalog_path)
    state = align_state(writer.load(), config.artists)

    resolver = ImageResolver(client, config)
    worker = AcquisitionWorker(client, resolver, storage)
    scheduler = BatchScheduler(worker, config.batch_size, config.batch_delay)

    summaries: List[ArtistSummary] = []
    for artist in config.active_artists():
        summary = await process_artist(artist, state, client, scheduler, writer, config)
        logger.info("Saved progress to %s", writer.path)
        summaries.append(summary)
    return summaries
