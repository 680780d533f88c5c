"""Data models used throughout the catalog pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from .utils import normalize_title

UNKNOWN_YEAR = "Unknown"

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A fallible call produced a value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The requested resource does not exist (or no strategy located it)."""

    detail: str = ""


@dataclass(frozen=True)
class TransientError:
    """A network or storage call failed; retrying on a later run may succeed."""

    detail: str


Outcome = Union[Success[T], NotFound, TransientError]


@dataclass(frozen=True)
class Candidate:
    """Artwork reference discovered on a listing page."""

    path: str
    slug: str
    title: str
    year: str = UNKNOWN_YEAR

    @property
    def key(self) -> str:
        return normalize_title(self.title)


@dataclass(frozen=True)
class ArtworkRecord:
    """Catalog entry for an artwork whose original has been stored."""

    title: str
    year: str
    dimensions: str
    storage_path: str
    thumbnail_path: Optional[str] = None

    @property
    def key(self) -> str:
        return normalize_title(self.title)

    @property
    def is_complete(self) -> bool:
        return bool(self.thumbnail_path)

    @property
    def filename(self) -> str:
        return self.storage_path.rsplit("/", 1)[-1]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "year": self.year,
            "dimensions": self.dimensions,
            "path": self.storage_path,
        }
        if self.thumbnail_path:
            payload["thumbnailPath"] = self.thumbnail_path
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ArtworkRecord":
        return cls(
            title=str(payload["title"]),
            year=str(payload.get("year") or UNKNOWN_YEAR),
            dimensions=str(payload.get("dimensions") or ""),
            storage_path=str(payload["path"]),
            thumbnail_path=payload.get("thumbnailPath") or None,
        )


@dataclass
class ArtistCatalog:
    """All known artworks for one artist, keyed by normalized title."""

    id: str
    name: str
    artworks: Dict[str, ArtworkRecord] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "artworks": [record.to_dict() for record in self.artworks.values()],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ArtistCatalog":
        catalog = cls(id=str(payload["id"]), name=str(payload.get("name") or payload["id"]))
        for item in payload.get("artworks") or []:
            record = ArtworkRecord.from_dict(item)
            catalog.artworks[record.key] = record
        return catalog


@dataclass
class CatalogState:
    """Root persisted document: one catalog per artist, in display order."""

    artists: List[ArtistCatalog] = field(default_factory=list)

    def get(self, artist_id: str) -> Optional[ArtistCatalog]:
        for catalog in self.artists:
            if catalog.id == artist_id:
                return catalog
        return None

    def upsert(self, catalog: ArtistCatalog) -> None:
        for index, existing in enumerate(self.artists):
            if existing.id == catalog.id:
                self.artists[index] = catalog
                return
        self.artists.append(catalog)

    def to_dict(self) -> Dict[str, Any]:
        return {"artists": [catalog.to_dict() for catalog in self.artists]}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CatalogState":
        return cls(artists=[ArtistCatalog.from_dict(item) for item in payload.get("artists") or []])

    @property
    def artwork_count(self) -> int:
        return sum(len(catalog.artworks) for catalog in self.artists)
