"""In-memory catalog for one artist, keyed by normalized title."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .config import Artist
from .models import ArtistCatalog, ArtworkRecord, Candidate


def _precedence(record: ArtworkRecord) -> Tuple[bool, str, str, str, str, str]:
    return (
        record.is_complete,
        record.storage_path,
        record.thumbnail_path or "",
        record.year,
        record.dimensions,
        record.title,
    )


def merge_records(current: Optional[ArtworkRecord], incoming: ArtworkRecord) -> ArtworkRecord:
    """Pick the surviving record for a key; independent of argument order."""
    if current is None or current == incoming:
        return incoming
    return max(current, incoming, key=_precedence)


class MergeStore:
    """Decides which candidates still need work and folds worker results back in.

    Only mutated between batches, so no locking is needed.
    """

    def __init__(self, artist: Artist, records: Iterable[ArtworkRecord] = ()) -> None:
        self.artist = artist
        self._records: Dict[str, ArtworkRecord] = {}
        for record in records:
            self.apply(record)

    @classmethod
    def from_catalog(cls, artist: Artist, catalog: Optional[ArtistCatalog]) -> "MergeStore":
        return cls(artist, catalog.artworks.values() if catalog else ())

    def __len__(self) -> int:
        return len(self._records)

    def get(self, candidate: Candidate) -> Optional[ArtworkRecord]:
        return self._records.get(candidate.key)

    def diff(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        """Candidates with no record, or a record still missing its thumbnail."""
        pending: List[Candidate] = []
        for candidate in candidates:
            existing = self._records.get(candidate.key)
            if existing is None or not existing.is_complete:
                pending.append(candidate)
        return pending

    def apply(self, record: Optional[ArtworkRecord]) -> bool:
        """Upsert a worker result; returns True when the stored record changed."""
        if record is None:
            return False
        key = record.key
        current = self._records.get(key)
        merged = merge_records(current, record)
        if merged == current:
            return False
        self._records[key] = merged
        return True

    def snapshot(self) -> ArtistCatalog:
        return ArtistCatalog(
            id=self.artist.id,
            name=self.artist.name,
            artworks=dict(self._records),
        )
