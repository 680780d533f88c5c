"""Configuration objects and constants for the catalog pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .errors import ConfigurationError

DEFAULT_ORIGIN = "https://www.wikiart.org"
DEFAULT_REGION = "us-east-2"
DEFAULT_PREFIX = "quilts"
DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY = 0.5
DEFAULT_THUMBNAIL_SUFFIX = "!PinterestSmall.jpg"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
)
# Upload hosts believed to serve the same image content, probed in order.
DEFAULT_MIRROR_HOSTS: Tuple[str, ...] = (
    "uploads.wikiart.org",
    "uploads0.wikiart.org",
    "uploads1.wikiart.org",
    "uploads2.wikiart.org",
    "uploads3.wikiart.org",
    "uploads4.wikiart.org",
    "uploads5.wikiart.org",
    "uploads6.wikiart.org",
    "uploads7.wikiart.org",
    "uploads8.wikiart.org",
)


@dataclass(frozen=True)
class Artist:
    """An artist whose catalog is maintained, identified by its origin slug."""

    id: str
    name: str


DEFAULT_ARTISTS: Tuple[Artist, ...] = (
    Artist("claude-monet", "Claude Monet"),
    Artist("paul-cezanne", "Paul Cézanne"),
    Artist("henri-matisse", "Henri Matisse"),
    Artist("pablo-picasso", "Pablo Picasso"),
    Artist("rembrandt", "Rembrandt"),
    Artist("egon-schiele", "Egon Schiele"),
)


@dataclass(frozen=True)
class StorageConfig:
    """Settings for the blob store that receives originals and thumbnails."""

    bucket: str
    access_key_id: str
    secret_access_key: str
    region: str = DEFAULT_REGION
    prefix: str = DEFAULT_PREFIX


@dataclass
class CatalogConfig:
    """Top-level settings that control discovery, acquisition and checkpointing."""

    catalog_path: Path
    artists: Tuple[Artist, ...] = DEFAULT_ARTISTS
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay: float = DEFAULT_BATCH_DELAY
    request_timeout: float = 30.0
    origin: str = DEFAULT_ORIGIN
    mirror_hosts: Tuple[str, ...] = DEFAULT_MIRROR_HOSTS
    thumbnail_suffix: str = DEFAULT_THUMBNAIL_SUFFIX
    user_agent: str = DEFAULT_USER_AGENT
    selected_artist_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.batch_delay < 0:
            raise ConfigurationError(f"batch_delay cannot be negative, got {self.batch_delay}")
        known = {artist.id for artist in self.artists}
        unknown = [artist_id for artist_id in self.selected_artist_ids if artist_id not in known]
        if unknown:
            raise ConfigurationError(f"Unknown artist id(s): {', '.join(unknown)}")
        self.origin = self.origin.rstrip("/")

    def active_artists(self) -> Tuple[Artist, ...]:
        """Artists to process this run, in display order."""
        if not self.selected_artist_ids:
            return self.artists
        wanted = set(self.selected_artist_ids)
        return tuple(artist for artist in self.artists if artist.id in wanted)

    def listing_url(self, artist_id: str) -> str:
        return f"{self.origin}/en/{artist_id}/all-works/text-list"

    def detail_url(self, path: str) -> str:
        return f"{self.origin}{path}"


def load_storage_config(environ: Optional[Mapping[str, str]] = None) -> StorageConfig:
    """Build storage settings from environment variables.

    ``S3_BUCKET``, ``AWS_ACCESS_KEY_ID`` and ``AWS_SECRET_ACCESS_KEY`` are
    required; ``AWS_REGION`` and ``S3_PREFIX`` fall back to defaults.
    """
    env = os.environ if environ is None else environ
    bucket = (env.get("S3_BUCKET") or "").strip()
    access_key = (env.get("AWS_ACCESS_KEY_ID") or "").strip()
    secret_key = (env.get("AWS_SECRET_ACCESS_KEY") or "").strip()

    missing = [
        name
        for name, value in (
            ("S3_BUCKET", bucket),
            ("AWS_ACCESS_KEY_ID", access_key),
            ("AWS_SECRET_ACCESS_KEY", secret_key),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return StorageConfig(
        bucket=bucket,
        access_key_id=access_key,
        secret_access_key=secret_key,
        region=(env.get("AWS_REGION") or DEFAULT_REGION).strip(),
        prefix=(env.get("S3_PREFIX") or DEFAULT_PREFIX).strip().strip("/"),
    )

