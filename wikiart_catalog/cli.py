"""Command-line entry point for the catalog pipeline."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from dotenv import load_dotenv

from .config import (
    DEFAULT_ARTISTS,
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    CatalogConfig,
    StorageConfig,
    load_storage_config,
)
from .crawler import ArtistSummary, run_catalog
from .errors import ConfigurationError
from .network import open_http_client
from .storage import S3BlobStore

logger = logging.getLogger("wikiart_catalog.cli")

EXIT_DISCOVERY_FAILED = 1
EXIT_CONFIGURATION_ERROR = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Discover artworks per artist, store originals and thumbnails in S3, "
            "and keep a resumable JSON catalog."
        ),
    )
    parser.add_argument(
        "--catalog",
        default="artists.json",
        type=Path,
        help="Catalog JSON file read at startup and rewritten after every batch",
    )
    parser.add_argument(
        "--artist",
        action="append",
        dest="artists",
        metavar="ID",
        choices=[artist.id for artist in DEFAULT_ARTISTS],
        help="Only process this artist (repeatable); others keep their stored data",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Artworks acquired concurrently per batch",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_BATCH_DELAY,
        help="Seconds to pause between batches",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


async def _run(config: CatalogConfig, storage_config: StorageConfig) -> List[ArtistSummary]:
    storage = S3BlobStore.from_config(storage_config)
    async with open_http_client(config) as client:
        return await run_catalog(config, client, storage)


def _log_summaries(summaries: List[ArtistSummary], elapsed: float) -> None:
    logger.info("=== Scraping Complete ===")
    logger.info("Processed %d artists in %.2fs", len(summaries), elapsed)
    total = 0
    for summary in summaries:
        logger.info(
            "  %s: %d artworks (%d new/updated, %d partial, %d skipped, %d failed)%s",
            summary.name,
            summary.artworks,
            summary.completed,
            summary.partial,
            summary.skipped,
            summary.failed,
            " [listing unavailable]" if summary.discovery_failed else "",
        )
        logger.debug(
            "Timing for %s -> %.2fs (%d discovered, %d scheduled)",
            summary.artist_id,
            summary.total_seconds,
            summary.discovered,
            summary.scheduled,
        )
        total += summary.artworks
    logger.info("Total artworks: %d", total)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    load_dotenv()

    try:
        storage_config = load_storage_config()
        config = CatalogConfig(
            catalog_path=Path(args.catalog).resolve(),
            selected_artist_ids=tuple(args.artists or ()),
            batch_size=args.batch_size,
            batch_delay=args.delay,
            request_timeout=args.timeout,
        )
    except ConfigurationError as exc:
        logger.error("Error: %s", exc)
        sys.exit(EXIT_CONFIGURATION_ERROR)

    overall_start = time.perf_counter()
    summaries = asyncio.run(_run(config, storage_config))
    _log_summaries(summaries, time.perf_counter() - overall_start)

    if any(summary.discovery_failed for summary in summaries):
        sys.exit(EXIT_DISCOVERY_FAILED)


if __name__ == "__main__":
    main()
