"""Batched, strictly ordered dispatch of pending candidates to the worker."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, List, Sequence

from .config import DEFAULT_BATCH_DELAY, DEFAULT_BATCH_SIZE
from .models import ArtistCatalog, Candidate
from .store import MergeStore
from .worker import AcquisitionResult, AcquisitionWorker

logger = logging.getLogger("wikiart_catalog")


@dataclass
class BatchCompleted:
    """Emitted once every result of a batch has been merged into the store."""

    number: int
    total: int
    results: List[AcquisitionResult]
    catalog: ArtistCatalog


def partition(items: Sequence[Candidate], size: int) -> List[List[Candidate]]:
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


class BatchScheduler:
    """Runs batches one after another; each batch fans out concurrently.

    ``run`` is an async generator: the next batch does not start until the
    consumer has handled the previous ``BatchCompleted`` event, so a
    checkpoint written by the consumer always reflects fully settled batches.
    """

    def __init__(
        self,
        worker: AcquisitionWorker,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = DEFAULT_BATCH_DELAY,
    ) -> None:
        self._worker = worker
        self.batch_size = batch_size
        self.delay = delay

    async def _run_batch(
        self, store: MergeStore, batch: List[Candidate]
    ) -> List[AcquisitionResult]:
        semaphore = asyncio.Semaphore(self.batch_size)
        artist_id = store.artist.id

        async def run_one(candidate: Candidate) -> AcquisitionResult:
            async with semaphore:
                return await self._worker.process(artist_id, candidate, store.get(candidate))

        return list(await asyncio.gather(*(run_one(candidate) for candidate in batch)))

    async def run(
        self, store: MergeStore, pending: Sequence[Candidate]
    ) -> AsyncIterator[BatchCompleted]:
        batches = partition(pending, self.batch_size)
        total = len(batches)
        offset = 0
        for number, batch in enumerate(batches, start=1):
            logger.info(
                "Batch %d/%d (artworks %d-%d)",
                number,
                total,
                offset + 1,
                offset + len(batch),
            )
            results = await self._run_batch(store, batch)
            for result in results:
                store.apply(result.record)
            offset += len(batch)

            yield BatchCompleted(
                number=number,
                total=total,
                results=results,
                catalog=store.snapshot(),
            )

            if number < total and self.delay:
                await asyncio.sleep(self.delay)
