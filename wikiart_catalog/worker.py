"""Per-artwork acquisition: resolve, download, decode, upload original and thumbnail."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .images import (
    DEFAULT_EXTENSION,
    ImageDecodeError,
    content_type_for,
    decode_image,
    detect_image_format,
)
from .models import ArtworkRecord, Candidate, Success
from .resolver import ImageResolver, ResolvedImage
from .storage import artwork_filename, original_key, thumbnail_key, with_extension

logger = logging.getLogger("wikiart_catalog")


class AcquisitionState(Enum):
    PENDING = "pending"
    RESOLVING = "resolving"
    DOWNLOADING_ORIGINAL = "downloading_original"
    DECODING_DIMENSIONS = "decoding_dimensions"
    UPLOADING_ORIGINAL = "uploading_original"
    DOWNLOADING_THUMBNAIL = "downloading_thumbnail"
    UPLOADING_THUMBNAIL = "uploading_thumbnail"
    DONE = "done"
    PARTIAL = "partial"
    UNCHANGED = "unchanged"
    SKIPPED_NO_URL = "skipped_no_url"
    SKIPPED_BAD_IMAGE = "skipped_bad_image"
    FAILED = "failed"


@dataclass(frozen=True)
class AcquisitionResult:
    """Record returned by the worker and the terminal state it reached."""

    candidate: Candidate
    record: Optional[ArtworkRecord]
    state: AcquisitionState


class AcquisitionWorker:
    """Drives one candidate through the acquisition states.

    Failures never propagate: anything that goes wrong before the original is
    stored yields the prior record unchanged, and a failed thumbnail leaves the
    freshly stored original in place without ``thumbnail_path``.
    """

    def __init__(self, client, resolver: ImageResolver, storage) -> None:
        self._client = client
        self._resolver = resolver
        self._storage = storage

    async def process(
        self,
        artist_id: str,
        candidate: Candidate,
        existing: Optional[ArtworkRecord] = None,
    ) -> AcquisitionResult:
        try:
            return await self._process(artist_id, candidate, existing)
        except Exception:  # pylint: disable=broad-except
            logger.exception("  [%s] Unexpected error", candidate.title)
            return AcquisitionResult(candidate, existing, AcquisitionState.FAILED)

    async def _process(
        self,
        artist_id: str,
        candidate: Candidate,
        existing: Optional[ArtworkRecord],
    ) -> AcquisitionResult:
        needs_original = existing is None
        needs_thumbnail = existing is None or not existing.thumbnail_path
        if not needs_original and not needs_thumbnail:
            return AcquisitionResult(candidate, existing, AcquisitionState.UNCHANGED)

        self._enter(candidate, AcquisitionState.RESOLVING)
        resolved = await self._resolver.resolve(artist_id, candidate)
        if not isinstance(resolved, Success):
            logger.info("  [%s] Skipping: Could not find image URL", candidate.title)
            return AcquisitionResult(candidate, existing, AcquisitionState.SKIPPED_NO_URL)
        image: ResolvedImage = resolved.value

        record = existing
        if needs_original:
            self._enter(candidate, AcquisitionState.DOWNLOADING_ORIGINAL)
            download = await self._client.fetch_bytes(image.original_url)
            if not isinstance(download, Success):
                logger.error("  [%s] Error: %s", candidate.title, download.detail)
                return AcquisitionResult(candidate, existing, AcquisitionState.FAILED)

            self._enter(candidate, AcquisitionState.DECODING_DIMENSIONS)
            try:
                decoded = decode_image(download.value)
            except ImageDecodeError as exc:
                logger.info(
                    "  [%s] Skipping: Could not determine dimensions (%s)",
                    candidate.title,
                    exc,
                )
                return AcquisitionResult(
                    candidate, existing, AcquisitionState.SKIPPED_BAD_IMAGE
                )

            self._enter(candidate, AcquisitionState.UPLOADING_ORIGINAL)
            filename = artwork_filename(
                candidate.year, decoded.dimensions, candidate.title, decoded.extension
            )
            key = original_key(self._storage.prefix, artist_id, filename)
            upload = await self._storage.put(key, download.value, decoded.content_type)
            if not isinstance(upload, Success):
                logger.error("  [%s] Error: %s", candidate.title, upload.detail)
                return AcquisitionResult(candidate, existing, AcquisitionState.FAILED)

            record = ArtworkRecord(
                title=candidate.title,
                year=candidate.year,
                dimensions=decoded.dimensions,
                storage_path=key,
            )
            logger.info("  [%s] Original done - %s", candidate.title, decoded.dimensions)

        return await self._acquire_thumbnail(artist_id, candidate, record, image)

    async def _acquire_thumbnail(
        self,
        artist_id: str,
        candidate: Candidate,
        record: ArtworkRecord,
        image: ResolvedImage,
    ) -> AcquisitionResult:
        self._enter(candidate, AcquisitionState.DOWNLOADING_THUMBNAIL)
        download = await self._client.fetch_bytes(image.thumbnail_url)
        if not isinstance(download, Success):
            logger.error("  [%s] Thumbnail error: %s", candidate.title, download.detail)
            return AcquisitionResult(candidate, record, AcquisitionState.PARTIAL)

        self._enter(candidate, AcquisitionState.UPLOADING_THUMBNAIL)
        # Same name as the original, with the thumbnail's own extension.
        extension = detect_image_format(download.value) or DEFAULT_EXTENSION
        filename = with_extension(record.filename, extension)
        key = thumbnail_key(self._storage.prefix, artist_id, filename)
        upload = await self._storage.put(key, download.value, content_type_for(download.value))
        if not isinstance(upload, Success):
            logger.error("  [%s] Thumbnail error: %s", candidate.title, upload.detail)
            return AcquisitionResult(candidate, record, AcquisitionState.PARTIAL)

        logger.info("  [%s] Thumbnail done", candidate.title)
        return AcquisitionResult(
            candidate, replace(record, thumbnail_path=key), AcquisitionState.DONE
        )

    @staticmethod
    def _enter(candidate: Candidate, state: AcquisitionState) -> None:
        logger.debug("  [%s] %s", candidate.title, state.value)
